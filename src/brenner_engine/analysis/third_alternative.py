"""
Third alternative scoring.

Every hypothesis set must include a "both could be wrong" option. This
module scores how genuine that option is.

Quality levels:
- 0: No third alternative
- 1: Placeholder, or quality unclear
- 2: Has a mechanism but may be derivative of H1/H2
- 3: Genuinely orthogonal
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, Field

from brenner_engine.schemas.hypothesis import Hypothesis, HypothesisCategory

ORTHOGONAL_INDICATORS: tuple[re.Pattern[str], ...] = (
    re.compile(r"different causal structure", re.IGNORECASE),
    re.compile(r"shared assumption", re.IGNORECASE),
    re.compile(r"cross-domain", re.IGNORECASE),
    re.compile(r"neither.*nor", re.IGNORECASE),
    re.compile(r"entirely different", re.IGNORECASE),
    re.compile(r"orthogonal", re.IGNORECASE),
)

PLACEHOLDER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"both (?:could be|are|might be) wrong", re.IGNORECASE),
    re.compile(r"neither (?:is|may be) correct", re.IGNORECASE),
    re.compile(r"question (?:is|may be) misspecified", re.IGNORECASE),
)


class ThirdAlternativeReport(BaseModel):
    """Presence and quality of a set's third alternative."""

    present: bool = Field(..., description="Whether a third alternative exists")
    quality: Literal[0, 1, 2, 3] = Field(..., description="Quality score")
    message: str = Field(..., description="Explanation for the user")


def validate_third_alternative(hypotheses: Iterable[Hypothesis]) -> ThirdAlternativeReport:
    """
    Check that a hypothesis set includes a genuine third alternative.

    Orthogonality is checked before mechanism presence: an orthogonal third
    alternative scores 3 whether or not it has a mechanism.
    """
    third_alt = next(
        (h for h in hypotheses if h.category == HypothesisCategory.THIRD_ALTERNATIVE),
        None,
    )
    if third_alt is None:
        return ThirdAlternativeReport(
            present=False,
            quality=0,
            message="No third alternative hypothesis found. Every hypothesis set MUST include one.",
        )

    combined = f"{third_alt.statement.lower()} {(third_alt.mechanism or '').lower()}"

    if any(p.search(combined) for p in ORTHOGONAL_INDICATORS):
        return ThirdAlternativeReport(
            present=True,
            quality=3,
            message="Third alternative appears genuinely orthogonal.",
        )

    if third_alt.mechanism:
        return ThirdAlternativeReport(
            present=True,
            quality=2,
            message=(
                "Third alternative has a mechanism but may be derivative. "
                "Consider if it truly invalidates both other hypotheses."
            ),
        )

    if any(p.search(combined) for p in PLACEHOLDER_PATTERNS):
        return ThirdAlternativeReport(
            present=True,
            quality=1,
            message="Third alternative is a placeholder. Provide a specific mechanism or alternative framing.",
        )

    return ThirdAlternativeReport(
        present=True,
        quality=1,
        message="Third alternative present but quality unclear. Add more specificity.",
    )
