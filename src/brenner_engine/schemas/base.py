"""
Shared building blocks for the entity schemas.

Defines the ID grammars used across registries and the base model that
exchanges records with the web application in camelCase.
"""

import re
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# H-{session_id}-{sequence}, e.g. H-RS20251230-001, H-CELL-FATE-001-002
HYPOTHESIS_ID_PATTERN = re.compile(r"^H-[A-Za-z0-9][\w-]*-\d{3}$", re.ASCII)

# A-{session_id}-{sequence} or the short form A{n}
ASSUMPTION_ID_PATTERN = re.compile(r"^A-[A-Za-z0-9][\w-]*-\d{3}$|^A\d+$", re.ASCII)

# X-{session_id}-{sequence} or the short form X{n}
ANOMALY_ID_PATTERN = re.compile(r"^X-[A-Za-z0-9][\w-]*-\d{3}$|^X\d+$", re.ASCII)

# Transcript anchor: §n or §n-m
ANCHOR_PATTERN = re.compile(r"^§\d+(-\d+)?$", re.ASCII)


def _grammar(pattern: re.Pattern[str], message: str) -> AfterValidator:
    def check(value: str) -> str:
        if pattern.fullmatch(value) is None:
            raise ValueError(message)
        return value

    return AfterValidator(check)


HypothesisId = Annotated[
    str, _grammar(HYPOTHESIS_ID_PATTERN, "Invalid hypothesis ID format (expected H-{session}-{seq})")
]
AssumptionId = Annotated[str, _grammar(ASSUMPTION_ID_PATTERN, "Invalid assumption ID format")]
AnomalyId = Annotated[str, _grammar(ANOMALY_ID_PATTERN, "Invalid anomaly ID format")]
Anchor = Annotated[str, _grammar(ANCHOR_PATTERN, "Invalid anchor format (expected §n or §n-m)")]


class WireModel(BaseModel):
    """Base model serialized with camelCase keys, populated by either key style."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict using wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
