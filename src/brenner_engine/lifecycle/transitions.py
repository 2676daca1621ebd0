"""
Assumption lifecycle state machine.

State machine:
    unchecked  -> {challenged, verified, falsified}
    challenged -> {verified, falsified}
    verified   -> {challenged}   (new evidence can re-challenge)
    falsified  -> terminal       (triggers the propagation cascade)
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator

from brenner_engine.schemas.assumption import AssumptionStatus
from brenner_engine.schemas.base import WireModel


class AssumptionTrigger(str, Enum):
    """Events that move an assumption between states."""

    CHALLENGE = "challenge"  # Question an unchecked or verified assumption
    VERIFY = "verify"  # Evidence supports the assumption (for now)
    FALSIFY = "falsify"  # Evidence contradicts it; triggers propagation


VALID_ASSUMPTION_TRANSITIONS: Mapping[AssumptionStatus, Mapping[AssumptionTrigger, AssumptionStatus]] = (
    MappingProxyType(
        {
            AssumptionStatus.UNCHECKED: MappingProxyType(
                {
                    AssumptionTrigger.CHALLENGE: AssumptionStatus.CHALLENGED,
                    AssumptionTrigger.VERIFY: AssumptionStatus.VERIFIED,
                    AssumptionTrigger.FALSIFY: AssumptionStatus.FALSIFIED,
                }
            ),
            AssumptionStatus.CHALLENGED: MappingProxyType(
                {
                    AssumptionTrigger.VERIFY: AssumptionStatus.VERIFIED,
                    AssumptionTrigger.FALSIFY: AssumptionStatus.FALSIFIED,
                }
            ),
            AssumptionStatus.VERIFIED: MappingProxyType(
                {
                    AssumptionTrigger.CHALLENGE: AssumptionStatus.CHALLENGED,
                }
            ),
            AssumptionStatus.FALSIFIED: MappingProxyType({}),
        }
    )
)

# Every status needs a row, even an empty one.
_unmapped = set(AssumptionStatus) - set(VALID_ASSUMPTION_TRANSITIONS)
if _unmapped:
    raise RuntimeError(f"Transition table is missing rows for: {sorted(s.value for s in _unmapped)}")

# Canonical 8-4-4-4-12 hex form only
_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.ASCII | re.IGNORECASE,
)

# ISO-8601 date-time with a mandatory offset, e.g. 2025-12-30T20:00:00.000Z
_ISO_TIMESTAMP_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:\d{2})$",
    re.ASCII,
)


class AssumptionTransition(WireModel):
    """
    Immutable audit record of one assumption state change.

    This is the unit stored by the history store and the only record
    exchanged across the serialization boundary.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(..., description="Unique ID for this transition event")
    assumption_id: str = Field(..., description="The assumption that transitioned")
    from_state: AssumptionStatus = Field(..., description="State before the transition")
    to_state: AssumptionStatus = Field(..., description="State after the transition")
    trigger: AssumptionTrigger = Field(..., description="What triggered this transition")
    triggered_by: str | None = Field(default=None, description="Who or what triggered it")
    evidence_ref: str | None = Field(default=None, description="Evidence or test behind it")
    reason: str | None = Field(default=None, description="Human-readable reason")
    timestamp: AwareDatetime = Field(..., description="When this transition occurred")
    session_id: str | None = Field(default=None, description="Session where it happened")

    @field_validator("id", mode="before")
    @classmethod
    def _canonical_uuid(cls, value: Any) -> Any:
        if isinstance(value, UUID):
            return value
        if not isinstance(value, str) or _UUID_PATTERN.fullmatch(value) is None:
            raise ValueError("Transition id must be a hyphenated UUID string")
        return value

    @field_validator("timestamp", mode="before")
    @classmethod
    def _iso_timestamp(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str) or _ISO_TIMESTAMP_PATTERN.fullmatch(value) is None:
            raise ValueError("Timestamp must be an ISO-8601 string with a UTC offset")
        return value


class RequirementCheck(BaseModel):
    """Outcome of the (advisory) transition requirement check."""

    valid: bool = Field(default=True, description="Always true; requirements never block")
    warning: str | None = Field(default=None, description="Advisory message, if any")


def is_valid_assumption_transition(
    state: AssumptionStatus | str,
    trigger: AssumptionTrigger | str,
) -> bool:
    """Check whether ``trigger`` is legal from ``state``."""
    return get_assumption_target_state(state, trigger) is not None


def get_assumption_target_state(
    state: AssumptionStatus | str,
    trigger: AssumptionTrigger | str,
) -> AssumptionStatus | None:
    """Get the state ``trigger`` leads to from ``state``, or None if illegal."""
    return VALID_ASSUMPTION_TRANSITIONS[AssumptionStatus(state)].get(AssumptionTrigger(trigger))


def get_valid_assumption_triggers(state: AssumptionStatus | str) -> list[AssumptionTrigger]:
    """Get all triggers that are legal from ``state`` (empty for terminal states)."""
    return list(VALID_ASSUMPTION_TRANSITIONS[AssumptionStatus(state)])


def is_terminal_assumption_state(state: AssumptionStatus | str) -> bool:
    """Check if a state is terminal (no further transitions allowed)."""
    return AssumptionStatus(state) == AssumptionStatus.FALSIFIED


def validate_assumption_transition_requirements(
    trigger: AssumptionTrigger | str,
    evidence_ref: str | None = None,
) -> RequirementCheck:
    """
    Check the soft requirements for a transition.

    Verifying or falsifying without an evidence reference is allowed but
    produces a warning for the audit trail. The result is always valid.
    """
    trigger = AssumptionTrigger(trigger)
    if evidence_ref:
        return RequirementCheck()

    if trigger == AssumptionTrigger.FALSIFY:
        return RequirementCheck(
            warning=(
                "Falsifying an assumption without evidence reference. "
                "Consider providing evidenceRef for audit trail."
            ),
        )

    if trigger == AssumptionTrigger.VERIFY:
        return RequirementCheck(
            warning=(
                "Verifying an assumption without evidence reference. "
                "Consider providing evidenceRef for audit trail."
            ),
        )

    return RequirementCheck()
