"""
Assumption transition executor.

Applies a validated lifecycle transition, producing an updated assumption and
an immutable audit record. Falsifying transitions also carry the propagation
cascade. Refused transitions are returned as values, never raised.
"""

from __future__ import annotations

import logging
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from brenner_engine.clock import Clock, resolve_clock
from brenner_engine.config import get_settings
from brenner_engine.lifecycle.propagation import PropagationResult, compute_falsification_propagation
from brenner_engine.lifecycle.transitions import (
    AssumptionTransition,
    AssumptionTrigger,
    get_assumption_target_state,
    get_valid_assumption_triggers,
    is_terminal_assumption_state,
    validate_assumption_transition_requirements,
)
from brenner_engine.schemas.assumption import Assumption, AssumptionStatus

logger = logging.getLogger(__name__)


class TransitionErrorCode(str, Enum):
    """Reasons a transition can be refused."""

    INVALID_TRANSITION = "INVALID_TRANSITION"
    TERMINAL_STATE = "TERMINAL_STATE"


class TransitionError(BaseModel):
    """Details of a refused transition."""

    code: TransitionErrorCode = Field(..., description="Refusal reason")
    message: str = Field(..., description="Self-diagnosing explanation")
    from_state: AssumptionStatus = Field(..., description="State of the assumption")
    to_state: AssumptionStatus = Field(..., description="Unchanged state (equals from_state)")
    trigger: AssumptionTrigger = Field(..., description="The refused trigger")


class TransitionRefused(Exception):
    """Raised by ``TransitionResult.raise_for_error`` for a refused transition."""

    def __init__(self, error: TransitionError) -> None:
        super().__init__(error.message)
        self.error = error


class TransitionResult(BaseModel):
    """
    Outcome of ``transition_assumption``.

    Check ``success`` before reading the other fields: a refused transition
    carries only ``error``.
    """

    success: bool = Field(..., description="Whether the transition was applied")
    assumption: Assumption | None = Field(default=None, description="The updated assumption")
    transition: AssumptionTransition | None = Field(default=None, description="The audit record")
    propagation: PropagationResult | None = Field(
        default=None,
        description="Cascade, present only for falsify",
    )
    warning: str | None = Field(default=None, description="Advisory from the requirement check")
    error: TransitionError | None = Field(default=None, description="Why it was refused")

    def raise_for_error(self) -> TransitionResult:
        """Return self on success, raise TransitionRefused otherwise."""
        if not self.success and self.error is not None:
            raise TransitionRefused(self.error)
        return self


def _refuse(assumption: Assumption, trigger: AssumptionTrigger) -> TransitionResult:
    from_state = assumption.status

    if is_terminal_assumption_state(from_state):
        error = TransitionError(
            code=TransitionErrorCode.TERMINAL_STATE,
            message=(
                f"Cannot transition from terminal state '{from_state.value}'. "
                f"Assumption {assumption.id} has been falsified and cannot change."
            ),
            from_state=from_state,
            to_state=from_state,
            trigger=trigger,
        )
    else:
        valid = ", ".join(t.value for t in get_valid_assumption_triggers(from_state)) or "none"
        error = TransitionError(
            code=TransitionErrorCode.INVALID_TRANSITION,
            message=(
                f"Invalid transition: cannot {trigger.value} from state '{from_state.value}'. "
                f"Valid triggers: {valid}"
            ),
            from_state=from_state,
            to_state=from_state,
            trigger=trigger,
        )

    logger.info(f"Refused {trigger.value} on {assumption.id}: {error.code.value}")
    return TransitionResult(success=False, error=error)


def transition_assumption(
    assumption: Assumption,
    trigger: AssumptionTrigger | str,
    *,
    triggered_by: str | None = None,
    evidence_ref: str | None = None,
    reason: str | None = None,
    session_id: str | None = None,
    clock: Clock | None = None,
) -> TransitionResult:
    """
    Attempt to move an assumption to a new state.

    The input assumption is never modified. On success the result holds a new
    assumption value, the transition record, and, for ``falsify``, the
    propagation cascade computed over the post-transition assumption.

    Args:
        assumption: Current assumption value.
        trigger: The lifecycle trigger.
        triggered_by: Who or what triggered the transition.
        evidence_ref: Evidence or test behind the transition.
        reason: Human-readable reason.
        session_id: Session where the transition happens.
        clock: Optional clock used for timestamps.

    Returns:
        TransitionResult describing the outcome.

    Raises:
        ValueError: If ``trigger`` is not a known trigger.
    """
    trigger = AssumptionTrigger(trigger)
    now = resolve_clock(clock)

    to_state = get_assumption_target_state(assumption.status, trigger)
    if to_state is None:
        return _refuse(assumption, trigger)

    check = validate_assumption_transition_requirements(trigger, evidence_ref)
    if check.warning:
        level = getattr(logging, get_settings().evidence_warning_level)
        logger.log(level, f"{assumption.id}: {check.warning}")

    transition = AssumptionTransition(
        id=uuid4(),
        assumption_id=assumption.id,
        from_state=assumption.status,
        to_state=to_state,
        trigger=trigger,
        triggered_by=triggered_by,
        evidence_ref=evidence_ref,
        reason=reason,
        timestamp=now(),
        session_id=session_id,
    )

    updated = assumption.model_copy(update={"status": to_state, "updated_at": transition.timestamp})

    propagation = None
    if trigger == AssumptionTrigger.FALSIFY:
        propagation = compute_falsification_propagation(updated, clock=now)

    logger.debug(
        f"Assumption {assumption.id}: {transition.from_state.value} -> {to_state.value} via {trigger.value}"
    )
    return TransitionResult(
        success=True,
        assumption=updated,
        transition=transition,
        propagation=propagation,
        warning=check.warning,
    )


def challenge_assumption(
    assumption: Assumption,
    *,
    triggered_by: str | None = None,
    evidence_ref: str | None = None,
    reason: str | None = None,
    session_id: str | None = None,
    clock: Clock | None = None,
) -> TransitionResult:
    """Move an unchecked or verified assumption to ``challenged``."""
    return transition_assumption(
        assumption,
        AssumptionTrigger.CHALLENGE,
        triggered_by=triggered_by,
        evidence_ref=evidence_ref,
        reason=reason,
        session_id=session_id,
        clock=clock,
    )


def verify_assumption(
    assumption: Assumption,
    *,
    triggered_by: str | None = None,
    evidence_ref: str | None = None,
    reason: str | None = None,
    session_id: str | None = None,
    clock: Clock | None = None,
) -> TransitionResult:
    """Mark an assumption verified (it can still be re-challenged later)."""
    return transition_assumption(
        assumption,
        AssumptionTrigger.VERIFY,
        triggered_by=triggered_by,
        evidence_ref=evidence_ref,
        reason=reason,
        session_id=session_id,
        clock=clock,
    )


def falsify_assumption(
    assumption: Assumption,
    *,
    triggered_by: str | None = None,
    evidence_ref: str | None = None,
    reason: str | None = None,
    session_id: str | None = None,
    clock: Clock | None = None,
) -> TransitionResult:
    """
    Falsify an assumption. Terminal, and triggers the propagation cascade.

    On success, the caller should flag every id in
    ``result.propagation.undermined_hypotheses`` and
    ``result.propagation.invalidated_tests``.
    """
    return transition_assumption(
        assumption,
        AssumptionTrigger.FALSIFY,
        triggered_by=triggered_by,
        evidence_ref=evidence_ref,
        reason=reason,
        session_id=session_id,
        clock=clock,
    )
