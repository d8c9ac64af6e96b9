from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from formsteps.core.exception import ConfigurationError, UnknownStepError

StepId = str


class StepRegistry:
    """
    Ordered, immutable mapping of step ids to optional labels.

    Declared once per form type and shared by reference with every controller:

        STEPS = StepRegistry({"info": "Info", "payment": "Payment", "confirm": None})

    Steps without a label are "extra" steps as far as the sidebar is concerned;
    whether a step has fields is decided by the host form, not here.
    """

    def __init__(self, steps: Mapping[StepId, Optional[str]] | Iterable[Any] | None = None) -> None:
        self._order: Tuple[StepId, ...] = ()
        self._labels: Mapping[StepId, Optional[str]] = MappingProxyType({})
        self._index: Mapping[StepId, int] = MappingProxyType({})
        self._defined = False
        if steps is not None:
            self.define(steps)

    def define(self, steps: Mapping[StepId, Optional[str]] | Iterable[Any]) -> "StepRegistry":
        if self._defined:
            raise ConfigurationError(f"Steps already defined: {list(self._order)}")
        pairs = _normalize_pairs(steps)
        if not pairs:
            raise ConfigurationError("At least one step must be defined")

        labels: Dict[StepId, Optional[str]] = {}
        for step, label in pairs:
            if not isinstance(step, str) or not step:
                raise ConfigurationError(f"Step id must be a non-empty string, got {step!r}")
            if label is not None and not isinstance(label, str):
                raise ConfigurationError(f"Step {step!r} label must be a string or None, got {label!r}")
            if step in labels:
                raise ConfigurationError(f"Duplicate step id: {step!r}")
            labels[step] = label

        self._order = tuple(labels)
        self._labels = MappingProxyType(labels)
        self._index = MappingProxyType({step: i for i, step in enumerate(self._order)})
        self._defined = True
        return self

    @property
    def is_defined(self) -> bool:
        return self._defined

    def steps(self) -> Tuple[StepId, ...]:
        return self._order

    def label(self, step: StepId) -> Optional[str]:
        self.index(step)
        return self._labels[step]

    def labels(self) -> Dict[StepId, str]:
        """Labelled steps only, in declared order."""
        return {k: v for k, v in self._labels.items() if v is not None}

    def index(self, step: StepId) -> int:
        try:
            return self._index[step]
        except (KeyError, TypeError):
            raise UnknownStepError(step, known=self._order) from None

    def coerce(self, raw: Any) -> Optional[StepId]:
        """Map an untrusted round-trip value onto a declared step id, or None."""
        if raw is None:
            return None
        text = str(raw.value if isinstance(raw, Enum) else raw)
        for step in self._order:
            if step == text:
                return step
        return None

    def as_dict(self) -> Dict[StepId, Optional[str]]:
        return dict(self._labels)

    def __contains__(self, step: object) -> bool:
        try:
            return step in self._index
        except TypeError:
            return False

    def __iter__(self) -> Iterator[StepId]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        return f"StepRegistry({dict(self._labels)!r})"


def _normalize_pairs(steps: Any) -> list[tuple[Any, Any]]:
    if isinstance(steps, StepRegistry):
        return list(steps.as_dict().items())
    if isinstance(steps, Mapping):
        return list(steps.items())
    if isinstance(steps, (str, bytes)):
        raise ConfigurationError("Steps must be a mapping or a sequence of (id, label) pairs")
    pairs: list[tuple[Any, Any]] = []
    for item in steps:
        if isinstance(item, str):
            pairs.append((item, None))
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            pairs.append((item[0], item[1]))
        else:
            raise ConfigurationError(f"Invalid step declaration: {item!r}")
    return pairs


# Host form type integration
FORM_STEPS_ATTR = "form_steps"


def define_steps(form_cls: type, steps: Mapping[StepId, Optional[str]] | Iterable[Any]) -> StepRegistry:
    """Declare the steps of a host form type. Allowed once per class."""
    if FORM_STEPS_ATTR in vars(form_cls):
        raise ConfigurationError(f"Steps already defined for form type {form_cls.__name__}")
    registry = steps if isinstance(steps, StepRegistry) and steps.is_defined else StepRegistry(steps)
    setattr(form_cls, FORM_STEPS_ATTR, registry)
    return registry


def form_steps(form: Any) -> StepRegistry:
    cls = form if isinstance(form, type) else type(form)
    registry = getattr(cls, FORM_STEPS_ATTR, None)
    if not isinstance(registry, StepRegistry):
        raise ConfigurationError(f"Form type {cls.__name__} does not define any steps")
    return registry
