"""
Entity schemas for the epistemic lifecycle engine.

Defines the canonical Assumption and Hypothesis shapes, their ID grammars,
and factories that build well-formed initial values.
"""

from brenner_engine.schemas.assumption import (
    AffectedRecords,
    Assumption,
    AssumptionLoad,
    AssumptionStatus,
    AssumptionType,
    create_assumption,
    get_affected_by_falsification,
    is_valid_assumption_id,
)
from brenner_engine.schemas.hypothesis import (
    Hypothesis,
    HypothesisCategory,
    HypothesisConfidence,
    HypothesisOrigin,
    HypothesisState,
    create_hypothesis,
    create_third_alternative,
    generate_hypothesis_id,
    is_valid_anchor,
    is_valid_hypothesis_id,
    mechanism_warning,
)

__all__ = [
    "AffectedRecords",
    "Assumption",
    "AssumptionLoad",
    "AssumptionStatus",
    "AssumptionType",
    "create_assumption",
    "get_affected_by_falsification",
    "is_valid_assumption_id",
    "Hypothesis",
    "HypothesisCategory",
    "HypothesisConfidence",
    "HypothesisOrigin",
    "HypothesisState",
    "create_hypothesis",
    "create_third_alternative",
    "generate_hypothesis_id",
    "is_valid_anchor",
    "is_valid_hypothesis_id",
    "mechanism_warning",
]
