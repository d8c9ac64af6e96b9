from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from formsteps.core.controller import StepController
from formsteps.core.registry.steps import StepRegistry
from formsteps.core.runtime.settings import Settings
from formsteps.core.spec import FieldSpec
from formsteps.core.state import StepState


@dataclass
class StaticParam:
    """A host field whose state is known up front (already parsed and validated)."""

    name: str
    step: Optional[str] = None
    required: bool = False
    filled: bool = False
    valid: bool = True
    enabled: bool = True

    @property
    def disabled(self) -> bool:
        return not self.enabled

    @classmethod
    def from_spec(cls, spec: FieldSpec) -> "StaticParam":
        return cls(**spec.model_dump())


class StaticForm:
    """Reference host form over pre-computed field states.

    Useful for tooling and tests; real hosts adapt their own field model to
    the StepForm protocol instead. Step tracking is delegated to an owned
    StepController, available as `form.steps`:

        form = StaticForm(params, registry=STEPS, state=StepState.from_fields(request.form))
        form.steps.step, form.steps.accessible_steps()

    Without an explicit registry the steps declared on the form type with
    define_steps() are used.
    """

    def __init__(
        self,
        params: Iterable[StaticParam] = (),
        *,
        registry: StepRegistry | None = None,
        state: StepState | Mapping[str, Any] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._params = list(params)
        self.steps = StepController(self, state, registry=registry, settings=settings)

    @classmethod
    def from_specs(cls, fields: Iterable[FieldSpec], **kwargs: Any) -> "StaticForm":
        return cls([StaticParam.from_spec(f) for f in fields], **kwargs)

    def params(self) -> Sequence[StaticParam]:
        return tuple(self._params)

    def param(self, name: str) -> StaticParam:
        for p in self._params:
            if p.name == name:
                return p
        raise KeyError(f"Unknown field: {name}. Known: {[p.name for p in self._params]}")

    def valid(self, params: Sequence[StaticParam]) -> bool:
        return all(p.valid for p in params)

    def invalid(self, params: Sequence[StaticParam]) -> bool:
        return any(not p.valid for p in params)
