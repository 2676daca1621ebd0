"""
Hypothesis registry schema.

Canonical shape for hypotheses tracked across research sessions.
Provenance is explicit (anchors, is_inference) and the third alternative is
enforced at the set level by ``brenner_engine.analysis``, not here.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import AwareDatetime, Field

from brenner_engine.clock import Clock, resolve_clock
from brenner_engine.schemas.base import (
    ANCHOR_PATTERN,
    HYPOTHESIS_ID_PATTERN,
    Anchor,
    AnomalyId,
    AssumptionId,
    HypothesisId,
    WireModel,
)

_SEQUENCE_SUFFIX = re.compile(r"-(\d{3})$", re.ASCII)


class HypothesisConfidence(str, Enum):
    """
    Confidence levels for hypothesis assertions.

    - high: Strong theoretical/empirical backing
    - medium: Reasonable but untested
    - low: Speculative but grounded
    - speculative: Wild idea worth exploring
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SPECULATIVE = "speculative"


class HypothesisCategory(str, Enum):
    """
    Categories of hypothesis.

    - mechanistic: Proposes a causal mechanism (HOW)
    - phenomenological: Describes a pattern without mechanism (WHAT)
    - boundary: Defines scope/applicability (WHERE/WHEN)
    - auxiliary: Supporting hypothesis (not the main question)
    - third_alternative: The "both could be wrong" option
    """

    MECHANISTIC = "mechanistic"
    PHENOMENOLOGICAL = "phenomenological"
    BOUNDARY = "boundary"
    AUXILIARY = "auxiliary"
    THIRD_ALTERNATIVE = "third_alternative"


class HypothesisOrigin(str, Enum):
    """How the hypothesis came to exist."""

    PROPOSED = "proposed"
    THIRD_ALTERNATIVE = "third_alternative"
    REFINEMENT = "refinement"
    ANOMALY_SPAWNED = "anomaly_spawned"


class HypothesisState(str, Enum):
    """Lifecycle state of a hypothesis."""

    PROPOSED = "proposed"
    ACTIVE = "active"
    CONFIRMED = "confirmed"
    REFUTED = "refuted"
    SUPERSEDED = "superseded"
    DEFERRED = "deferred"


class Hypothesis(WireModel):
    """A falsifiable claim under investigation in a session."""

    # Identity
    id: HypothesisId = Field(..., description="H-{session}-{seq}")
    statement: str = Field(..., min_length=10, max_length=500, description="The falsifiable claim")
    mechanism: str | None = Field(default=None, max_length=1000, description="HOW it would work")

    # Classification
    origin: HypothesisOrigin = Field(..., description="How this hypothesis was created")
    category: HypothesisCategory = Field(..., description="Type of hypothesis")
    confidence: HypothesisConfidence = Field(..., description="Confidence level")

    # Relationships
    parent_id: HypothesisId | None = Field(default=None, description="Parent hypothesis for refinements")
    spawned_from_anomaly: AnomalyId | None = Field(default=None, description="Anomaly that spawned it")
    session_id: str = Field(..., min_length=1, description="Session where it was created")
    proposed_by: str | None = Field(default=None, description="Agent that proposed it")
    state: HypothesisState = Field(..., description="Current lifecycle state")

    # Provenance
    anchors: list[Anchor] | None = Field(default=None, description="§n transcript anchors")
    is_inference: bool = Field(default=False, description="Not directly grounded in the transcript")

    # Links to other registries
    linked_assumptions: list[AssumptionId] | None = Field(default=None, description="Assumptions it depends on")
    linked_anomalies: list[AnomalyId] | None = Field(default=None, description="Anomalies it explains")
    unresolved_critique_count: int = Field(default=0, ge=0, description="Open critiques targeting it")

    # Timestamps
    created_at: AwareDatetime = Field(..., description="Creation timestamp")
    updated_at: AwareDatetime = Field(..., description="Last update timestamp")

    # Metadata
    tags: list[str] | None = Field(default=None, description="Free-form tags")
    notes: str | None = Field(default=None, max_length=2000, description="Free-form notes")


def mechanism_warning(hypothesis: Hypothesis) -> str | None:
    """Advisory for a mechanistic hypothesis without a mechanism. Never blocks."""
    if hypothesis.category == HypothesisCategory.MECHANISTIC and not hypothesis.mechanism:
        return f"Hypothesis {hypothesis.id} is mechanistic but has no mechanism description."
    return None


def generate_hypothesis_id(session_id: str, existing_ids: list[str]) -> str:
    """
    Generate the next hypothesis ID for a session.

    Uses the highest existing sequence plus one, so gaps left by deleted
    hypotheses are never reused.

    Args:
        session_id: Session the hypothesis belongs to.
        existing_ids: IDs already allocated (any session).

    Returns:
        A new H-{session}-{seq} ID.
    """
    prefix = f"H-{session_id}-"
    sequences: list[int] = []
    for existing in existing_ids:
        if not existing.startswith(prefix):
            continue
        match = _SEQUENCE_SUFFIX.search(existing)
        sequences.append(int(match.group(1)) if match else 0)

    next_seq = max(sequences) + 1 if sequences else 1
    return f"{prefix}{next_seq:03d}"


def is_valid_hypothesis_id(hypothesis_id: str) -> bool:
    """Check a hypothesis ID against the H-{session}-{seq} grammar."""
    return HYPOTHESIS_ID_PATTERN.fullmatch(hypothesis_id) is not None


def is_valid_anchor(anchor: str) -> bool:
    """Check a transcript anchor against the §n / §n-m grammar."""
    return ANCHOR_PATTERN.fullmatch(anchor) is not None


def create_hypothesis(
    *,
    id: str,
    statement: str,
    session_id: str,
    category: HypothesisCategory | str,
    origin: HypothesisOrigin | str = HypothesisOrigin.PROPOSED,
    confidence: HypothesisConfidence | str = HypothesisConfidence.MEDIUM,
    mechanism: str | None = None,
    proposed_by: str | None = None,
    anchors: list[str] | None = None,
    is_inference: bool = False,
    clock: Clock | None = None,
) -> Hypothesis:
    """
    Create a new hypothesis in the ``proposed`` state.

    Raises:
        pydantic.ValidationError: If any field violates the schema.
    """
    now = resolve_clock(clock)()
    return Hypothesis.model_validate(
        {
            "id": id,
            "statement": statement,
            "mechanism": mechanism,
            "origin": origin,
            "category": category,
            "confidence": confidence,
            "session_id": session_id,
            "proposed_by": proposed_by,
            "state": HypothesisState.PROPOSED,
            "anchors": anchors,
            "is_inference": is_inference,
            "unresolved_critique_count": 0,
            "created_at": now,
            "updated_at": now,
        }
    )


def create_third_alternative(
    *,
    id: str,
    statement: str,
    session_id: str,
    mechanism: str,
    proposed_by: str | None = None,
    anchors: list[str] | None = None,
    clock: Clock | None = None,
) -> Hypothesis:
    """Create the session's third alternative. These are inferences by nature."""
    return create_hypothesis(
        id=id,
        statement=statement,
        session_id=session_id,
        category=HypothesisCategory.THIRD_ALTERNATIVE,
        origin=HypothesisOrigin.THIRD_ALTERNATIVE,
        confidence=HypothesisConfidence.MEDIUM,
        mechanism=mechanism,
        proposed_by=proposed_by,
        anchors=anchors,
        is_inference=True,
        clock=clock,
    )
