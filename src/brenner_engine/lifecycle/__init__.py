"""
Epistemic lifecycle engine.

Governs how assumptions move through verification states, computes the
falsification cascade, and keeps the append-only audit history.
"""

from brenner_engine.lifecycle.executor import (
    TransitionError,
    TransitionErrorCode,
    TransitionRefused,
    TransitionResult,
    challenge_assumption,
    falsify_assumption,
    transition_assumption,
    verify_assumption,
)
from brenner_engine.lifecycle.history import AssumptionTransitionHistoryStore, HistoryImportError
from brenner_engine.lifecycle.propagation import PropagationResult, compute_falsification_propagation
from brenner_engine.lifecycle.transitions import (
    VALID_ASSUMPTION_TRANSITIONS,
    AssumptionTransition,
    AssumptionTrigger,
    RequirementCheck,
    get_assumption_target_state,
    get_valid_assumption_triggers,
    is_terminal_assumption_state,
    is_valid_assumption_transition,
    validate_assumption_transition_requirements,
)

__all__ = [
    "TransitionError",
    "TransitionErrorCode",
    "TransitionRefused",
    "TransitionResult",
    "challenge_assumption",
    "falsify_assumption",
    "transition_assumption",
    "verify_assumption",
    "AssumptionTransitionHistoryStore",
    "HistoryImportError",
    "PropagationResult",
    "compute_falsification_propagation",
    "VALID_ASSUMPTION_TRANSITIONS",
    "AssumptionTransition",
    "AssumptionTrigger",
    "RequirementCheck",
    "get_assumption_target_state",
    "get_valid_assumption_triggers",
    "is_terminal_assumption_state",
    "is_valid_assumption_transition",
    "validate_assumption_transition_requirements",
]
