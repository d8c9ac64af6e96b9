from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class StepParam(Protocol):
    """
    Host field contract.

    The step tracker never owns or mutates fields; it only reads these
    attributes. `step` is the tag naming the step that owns the field
    (None for fields that belong to no step, e.g. the round-trip fields).
    """

    step: Optional[str]
    required: bool
    filled: bool
    enabled: bool
    disabled: bool


@runtime_checkable
class StepForm(Protocol):
    """
    Host form contract.

    Forms should:
      - return every field from params(), in a stable order
      - answer valid()/invalid() for an arbitrary subset of those fields
      - treat an empty subset as valid and not invalid
    """

    def params(self) -> Sequence[StepParam]: ...

    def valid(self, params: Sequence[StepParam]) -> bool: ...

    def invalid(self, params: Sequence[StepParam]) -> bool: ...


@runtime_checkable
class HasSteps(Protocol):
    """Capability of a host form that delegates step tracking to an owned controller."""

    @property
    def steps(self) -> Any: ...
