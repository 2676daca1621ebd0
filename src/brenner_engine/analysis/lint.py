"""Set-level linting that combines the heuristic classifiers."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, Field

from brenner_engine.analysis.level_conflation import detect_level_conflation
from brenner_engine.analysis.third_alternative import ThirdAlternativeReport, validate_third_alternative
from brenner_engine.schemas.hypothesis import Hypothesis, mechanism_warning

logger = logging.getLogger(__name__)


class HypothesisSetLint(BaseModel):
    """Advisory findings for a session's hypothesis set."""

    third_alternative: ThirdAlternativeReport = Field(..., description="Third alternative check")
    level_conflation: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Hypothesis id -> conflating phrases (only hypotheses with hits)",
    )
    mechanism_warnings: list[str] = Field(
        default_factory=list,
        description="Mechanistic hypotheses lacking a mechanism",
    )

    @property
    def clean(self) -> bool:
        """True when nothing was flagged and the third alternative is orthogonal."""
        return (
            self.third_alternative.quality == 3
            and not self.level_conflation
            and not self.mechanism_warnings
        )


def lint_hypothesis_set(hypotheses: Sequence[Hypothesis]) -> HypothesisSetLint:
    """Run every classifier over a hypothesis set."""
    conflation: dict[str, list[str]] = {}
    warnings: list[str] = []

    for hypothesis in hypotheses:
        text = hypothesis.statement
        if hypothesis.mechanism:
            text = f"{text} {hypothesis.mechanism}"
        hits = detect_level_conflation(text)
        if hits:
            conflation[hypothesis.id] = hits

        warning = mechanism_warning(hypothesis)
        if warning:
            warnings.append(warning)

    report = HypothesisSetLint(
        third_alternative=validate_third_alternative(hypotheses),
        level_conflation=conflation,
        mechanism_warnings=warnings,
    )
    logger.debug(
        f"Linted {len(hypotheses)} hypotheses: third-alt quality {report.third_alternative.quality}, "
        f"{len(conflation)} with conflation, {len(warnings)} mechanism warnings"
    )
    return report
