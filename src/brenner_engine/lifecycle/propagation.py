"""
Falsification propagation.

Computes which hypotheses and tests are implicated when an assumption is
falsified. The result only names the affected records; flagging them as
"assumption-undermined" / "assumption-invalidated" is the caller's job.
"""

from __future__ import annotations

from pydantic import AwareDatetime, ConfigDict, Field

from brenner_engine.clock import Clock, resolve_clock
from brenner_engine.schemas.assumption import Assumption, get_affected_by_falsification
from brenner_engine.schemas.base import WireModel


class PropagationResult(WireModel):
    """The cascade caused by falsifying one assumption."""

    model_config = ConfigDict(frozen=True)

    falsified_assumption_id: str = Field(..., description="The assumption that was falsified")
    # Wire key keeps the historical "underminded" spelling.
    undermined_hypotheses: list[str] = Field(
        default_factory=list,
        alias="undermindedHypotheses",
        description="Hypotheses that depend on the assumption",
    )
    invalidated_tests: list[str] = Field(
        default_factory=list,
        description="Tests that require the assumption",
    )
    summary: str = Field(..., description="Human-readable summary of the cascade")
    timestamp: AwareDatetime = Field(..., description="When the propagation was computed")


def compute_falsification_propagation(
    assumption: Assumption,
    *,
    clock: Clock | None = None,
) -> PropagationResult:
    """
    Compute the propagation cascade for a falsified assumption.

    Pure function of ``assumption.load``: ids keep their recorded order, and
    calling it again on the same assumption names the same records.

    Args:
        assumption: The (falsified) assumption.
        clock: Optional clock used to stamp the result.

    Returns:
        The PropagationResult describing the cascade.
    """
    affected = get_affected_by_falsification(assumption)

    parts = [f"Assumption {assumption.id} falsified."]
    if affected.hypotheses:
        parts.append(
            f"{len(affected.hypotheses)} hypothesis(es) undermined: {', '.join(affected.hypotheses)}."
        )
    if affected.tests:
        parts.append(f"{len(affected.tests)} test(s) invalidated: {', '.join(affected.tests)}.")
    if not affected.hypotheses and not affected.tests:
        parts.append("No linked hypotheses or tests affected.")

    return PropagationResult(
        falsified_assumption_id=assumption.id,
        undermined_hypotheses=affected.hypotheses,
        invalidated_tests=affected.tests,
        summary=" ".join(parts),
        timestamp=resolve_clock(clock)(),
    )
