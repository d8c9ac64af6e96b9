from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


class StepDefSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    # Steps without a label are left out of the sidebar names.
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Fields (reference host only)
# ---------------------------------------------------------------------------


class FieldSpec(BaseModel):
    """Plain-data description of one host field, as used by the reference host.

    Real host form frameworks supply their own field objects; this only covers
    the attributes the step tracker consults.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    step: Optional[str] = None
    required: bool = False
    filled: bool = False
    valid: bool = True
    enabled: bool = True


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class StepsFileSpec(BaseModel):
    """steps.yaml root schema."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    steps: List[StepDefSpec]
    fields: List[FieldSpec] = Field(default_factory=list)

    def step_pairs(self) -> list[tuple[str, Optional[str]]]:
        return [(s.id, s.label) for s in self.steps]


__all__ = [
    "StepDefSpec",
    "FieldSpec",
    "StepsFileSpec",
]
