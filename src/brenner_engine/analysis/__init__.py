"""
Heuristic text classifiers for hypothesis sets.

Regex-driven, stateless checks used by form-level linting.
"""

from brenner_engine.analysis.level_conflation import LEVEL_CONFLATION_PATTERNS, detect_level_conflation
from brenner_engine.analysis.lint import HypothesisSetLint, lint_hypothesis_set
from brenner_engine.analysis.third_alternative import ThirdAlternativeReport, validate_third_alternative

__all__ = [
    "LEVEL_CONFLATION_PATTERNS",
    "detect_level_conflation",
    "HypothesisSetLint",
    "lint_hypothesis_set",
    "ThirdAlternativeReport",
    "validate_third_alternative",
]
