"""
Assumption registry schema.

An assumption is a load-bearing premise. Its ``load`` records which
hypotheses and tests depend on it, so that a falsification can be
propagated to everything it supports.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from pydantic import AwareDatetime, ConfigDict, Field

from brenner_engine.clock import Clock, resolve_clock
from brenner_engine.schemas.base import ASSUMPTION_ID_PATTERN, AssumptionId, WireModel


class AssumptionStatus(str, Enum):
    """Verification status of an assumption."""

    UNCHECKED = "unchecked"
    CHALLENGED = "challenged"
    VERIFIED = "verified"
    FALSIFIED = "falsified"  # Terminal


class AssumptionType(str, Enum):
    """Kinds of assumption tracked by the registry."""

    BACKGROUND = "background"
    METHODOLOGICAL = "methodological"
    BOUNDARY = "boundary"
    SCALE_PHYSICS = "scale_physics"


class AssumptionLoad(WireModel):
    """The hypotheses and tests that rest on an assumption."""

    model_config = ConfigDict(frozen=True)

    affected_hypotheses: list[str] = Field(
        default_factory=list,
        description="Hypotheses that depend on this assumption",
    )
    affected_tests: list[str] = Field(
        default_factory=list,
        description="Tests that require this assumption to hold",
    )
    description: str = Field(default="", description="Why this assumption is load-bearing")


class Assumption(WireModel):
    """
    A load-bearing premise.

    Instances are frozen: the lifecycle executor produces updated copies and
    never mutates a record in place.
    """

    model_config = ConfigDict(frozen=True)

    id: AssumptionId = Field(..., description="A-{session}-{seq} or A{n}")
    statement: str = Field(..., min_length=1, max_length=1000, description="The assumed premise")
    type: AssumptionType = Field(..., description="Kind of assumption")
    status: AssumptionStatus = Field(
        default=AssumptionStatus.UNCHECKED,
        description="Current verification status",
    )
    load: AssumptionLoad = Field(default_factory=AssumptionLoad, description="Dependent records")
    session_id: str = Field(..., min_length=1, description="Session that owns this assumption")
    created_at: AwareDatetime = Field(..., description="When the assumption was recorded")
    updated_at: AwareDatetime = Field(..., description="When the status last changed")


class AffectedRecords(NamedTuple):
    """Hypothesis and test ids implicated by a falsified assumption."""

    hypotheses: list[str]
    tests: list[str]


def create_assumption(
    *,
    id: str,
    statement: str,
    type: AssumptionType | str,
    session_id: str,
    load: AssumptionLoad | dict | None = None,
    clock: Clock | None = None,
) -> Assumption:
    """
    Create a new, unchecked assumption.

    Args:
        id: Assumption ID.
        statement: The assumed premise.
        type: Kind of assumption.
        session_id: Owning session.
        load: Dependent hypotheses/tests (empty if None).
        clock: Optional clock used to stamp timestamps.

    Returns:
        The validated Assumption.
    """
    now = resolve_clock(clock)()
    return Assumption.model_validate(
        {
            "id": id,
            "statement": statement,
            "type": type,
            "status": AssumptionStatus.UNCHECKED,
            "load": load if load is not None else AssumptionLoad(),
            "session_id": session_id,
            "created_at": now,
            "updated_at": now,
        }
    )


def is_valid_assumption_id(assumption_id: str) -> bool:
    """Check an assumption ID against the A-{session}-{seq} / A{n} grammar."""
    return ASSUMPTION_ID_PATTERN.fullmatch(assumption_id) is not None


def get_affected_by_falsification(assumption: Assumption) -> AffectedRecords:
    """Return the records a falsification of ``assumption`` would implicate, in load order."""
    return AffectedRecords(
        hypotheses=list(assumption.load.affected_hypotheses),
        tests=list(assumption.load.affected_tests),
    )
