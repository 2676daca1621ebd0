"""
Assumption transition history.

An append-only, per-assumption ledger of transition records. Create one
store per session and pass it to whatever owns the session; there is no
shared global instance and no internal locking.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from brenner_engine.lifecycle.transitions import AssumptionTransition, AssumptionTrigger

logger = logging.getLogger(__name__)


class HistoryImportError(ValueError):
    """Raised when an exported ledger is malformed."""

    def __init__(
        self,
        assumption_id: str,
        index: int | None,
        cause: ValidationError | str,
    ) -> None:
        if index is None:
            super().__init__(f"Invalid transition history for {assumption_id}: {cause}")
        else:
            detail = cause
            if isinstance(cause, ValidationError):
                detail = f"{cause.error_count()} validation error(s)\n{cause}"
            super().__init__(f"Invalid transition record at {assumption_id}[{index}]: {detail}")
        self.assumption_id = assumption_id
        self.index = index
        self.cause = cause


class AssumptionTransitionHistoryStore:
    """
    Keyed ledger of assumption transitions.

    Records are kept per assumption in append order. The store never
    validates or deduplicates on ``add``; validation happens on import.
    """

    def __init__(self) -> None:
        self._history: dict[str, list[AssumptionTransition]] = {}

    def __len__(self) -> int:
        """Total number of transition records."""
        return sum(len(transitions) for transitions in self._history.values())

    def __contains__(self, assumption_id: object) -> bool:
        return assumption_id in self._history

    def __repr__(self) -> str:
        return f"AssumptionTransitionHistoryStore(assumptions={len(self._history)}, transitions={len(self)})"

    def assumption_ids(self) -> list[str]:
        """Get the ids of all assumptions with history, in first-seen order."""
        return list(self._history)

    def add(self, transition: AssumptionTransition) -> None:
        """
        Append a transition to its assumption's history.

        Args:
            transition: The record to append.
        """
        self._history.setdefault(transition.assumption_id, []).append(transition)
        logger.debug(f"Recorded transition {transition.id} for {transition.assumption_id}")

    def get_history(self, assumption_id: str) -> list[AssumptionTransition]:
        """Get all transitions for an assumption (empty for unknown ids)."""
        return list(self._history.get(assumption_id, []))

    def get_latest_transition(self, assumption_id: str) -> AssumptionTransition | None:
        """Get the most recently appended transition for an assumption."""
        transitions = self._history.get(assumption_id)
        return transitions[-1] if transitions else None

    def get_falsified_assumptions(self) -> list[str]:
        """Get the ids of all assumptions with a falsify transition."""
        return [
            assumption_id
            for assumption_id, transitions in self._history.items()
            if any(t.trigger == AssumptionTrigger.FALSIFY for t in transitions)
        ]

    def get_transitions_by_evidence(self, evidence_ref: str) -> list[AssumptionTransition]:
        """Get all transitions citing ``evidence_ref``, in key-then-append order."""
        return [
            t
            for transitions in self._history.values()
            for t in transitions
            if t.evidence_ref == evidence_ref
        ]

    def get_all_transitions(self) -> list[AssumptionTransition]:
        """Get every transition in chronological order (ties keep append order)."""
        flattened = [t for transitions in self._history.values() for t in transitions]
        return sorted(flattened, key=lambda t: t.timestamp)

    def clear(self) -> None:
        """Remove all history."""
        logger.info(f"Clearing transition history ({len(self)} records)")
        self._history.clear()

    def export(self) -> dict[str, list[dict[str, Any]]]:
        """
        Export history to a JSON-compatible snapshot.

        Returns:
            Mapping of assumption id to its transition records (wire format).
        """
        return {
            assumption_id: [t.to_wire() for t in transitions]
            for assumption_id, transitions in self._history.items()
        }

    def import_history(
        self,
        data: Mapping[str, Sequence[AssumptionTransition | Mapping[str, Any]]],
    ) -> None:
        """
        Replace the current history with an exported snapshot.

        Every record is validated before anything is replaced, so a single
        malformed record leaves the store exactly as it was.

        Args:
            data: Mapping of assumption id to transition records.

        Raises:
            HistoryImportError: If any value is not a list or any record fails
                validation.
            TypeError: If ``data`` is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"History snapshot must be a mapping, got {type(data).__name__}")

        validated: dict[str, list[AssumptionTransition]] = {}
        for assumption_id, records in data.items():
            if not isinstance(records, (list, tuple)):
                logger.error(f"Rejecting history import: {assumption_id} is not a list of records")
                raise HistoryImportError(
                    assumption_id, None, f"expected a list of records, got {type(records).__name__}"
                )
            parsed: list[AssumptionTransition] = []
            for index, record in enumerate(records):
                try:
                    parsed.append(AssumptionTransition.model_validate(record))
                except ValidationError as e:
                    logger.error(f"Rejecting history import: bad record at {assumption_id}[{index}]")
                    raise HistoryImportError(assumption_id, index, e) from e
            validated[assumption_id] = parsed

        self._history = validated
        logger.info(f"Imported history for {len(validated)} assumption(s), {len(self)} records")

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize the exported snapshot to a JSON string."""
        return json.dumps(self.export(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> AssumptionTransitionHistoryStore:
        """
        Build a store from a JSON snapshot produced by ``to_json``.

        Raises:
            json.JSONDecodeError: If ``text`` is not JSON.
            HistoryImportError: If any record is malformed.
        """
        store = cls()
        store.import_history(json.loads(text))
        return store
