"""Step tracking for multi-step forms.

A StepController is created for every inbound submission of a form that
carries step state. Construction runs the one and only transition:

  - the submitted step/next/last/seen values are matched against the declared
    steps, falling back to defaults for anything unknown
  - when the fields of the current step validate, the controller moves to the
    requested `next` step
  - `last` (furthest accessible step) and `seen` (deepest step whose
    predecessor validated) only ever move forward

Everything else is a read-only query over the registry, the resulting
step/last/seen triple and the host form's field validity.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from formsteps.core.exception import ConfigurationError
from formsteps.core.observability import log_event
from formsteps.core.registry.steps import StepId, StepRegistry, form_steps
from formsteps.core.runtime.settings import Settings
from formsteps.core.state import StepState

if TYPE_CHECKING:
    from formsteps.core.forms.base import StepForm, StepParam

log = logging.getLogger('formsteps.core.controller')


@dataclass(frozen=True)
class StepStatus:
    """Sidebar-ready summary of a single step."""

    step: StepId
    label: Optional[str]
    index: int
    current: bool
    extra: bool
    accessible: bool
    finished: bool
    good: bool
    bad: bool

    def as_dict(self) -> dict:
        return asdict(self)


def _flatten(steps: Iterable[Any]) -> Iterator[StepId]:
    for s in steps:
        if isinstance(s, (list, tuple, set, frozenset)):
            yield from _flatten(s)
        elif s is not None:
            yield s


class StepController:
    def __init__(
        self,
        form: "StepForm",
        state: StepState | Mapping[str, Any] | None = None,
        *,
        registry: StepRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.form = form
        self.form_steps = registry if registry is not None else form_steps(form)
        if not self.form_steps.is_defined:
            raise ConfigurationError("Step registry has no steps defined")
        self.settings = settings or Settings()
        if state is None:
            state = StepState()
        elif not isinstance(state, StepState):
            state = StepState.from_fields(state, prefix=self.settings.field_prefix)
        self.step: StepId = self.form_steps.steps()[0]
        self.last: StepId = self.step
        self.seen: Optional[StepId] = self.step
        self._transition(state)

    # ------------------------------------------------------------------
    # Transition
    # ------------------------------------------------------------------

    def _coerce(self, name: str, raw: Optional[str]) -> Optional[StepId]:
        step = self.form_steps.coerce(raw)
        if raw is not None and step is None:
            log.debug("Ignoring invalid %s=%r; declared steps: %s", name, raw, list(self.form_steps))
        return step

    def _transition(self, state: StepState) -> None:
        step = self._coerce("step", state.step)
        requested = self._coerce("next", state.next)
        last = self._coerce("last", state.last)
        seen = self._coerce("seen", state.seen)

        if step is None:
            step = self.first_step()
        if requested is None:
            requested = step
        if last is None:
            last = step
        seen = self.last_step(seen, step)

        validated = self.is_correct_step(step)
        if validated:
            step = requested
            seen = self.last_step(seen, self.previous_step(step))

        self.step = step
        self.seen = seen
        self.last = self.last_step(step, last, seen)

        log_event(
            log,
            settings=self.settings,
            level=logging.DEBUG,
            event="step_transition",
            step_in=state.step,
            next=state.next,
            validated=validated,
            step=self.step,
            last=self.last,
            seen=self.seen,
        )

    def unlock_steps(self) -> "StepController":
        """Make all steps instantly available. Returns self for chaining."""
        self.last = self.seen = self.last_step()
        log_event(log, settings=self.settings, level=logging.DEBUG, event="steps_unlocked", last=self.last)
        return self

    @property
    def state(self) -> StepState:
        """The durable step/last/seen triple to echo back to the client."""
        return StepState(step=self.step, last=self.last, seen=self.seen)

    def to_fields(self) -> dict[str, str]:
        return self.state.to_fields(prefix=self.settings.field_prefix)

    # ------------------------------------------------------------------
    # Registry views
    # ------------------------------------------------------------------

    def _step(self, step: Optional[StepId]) -> StepId:
        return self.step if step is None else step

    def steps(self) -> Tuple[StepId, ...]:
        return self.form_steps.steps()

    def step_name(self, step: Optional[StepId] = None) -> Optional[str]:
        return self.form_steps.label(self._step(step))

    def step_names(self) -> dict[StepId, str]:
        """Labelled steps along with their names, for use in a sidebar."""
        return self.form_steps.labels()

    def next_step_name(self) -> Optional[str]:
        step = self.next_step()
        return self.form_steps.label(step) if step is not None else None

    def previous_step_name(self) -> Optional[str]:
        step = self.previous_step()
        return self.form_steps.label(step) if step is not None else None

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def step_index(self, step: Optional[StepId] = None) -> int:
        return self.form_steps.index(self._step(step))

    def step_before(self, step: StepId, other: Optional[StepId] = None) -> bool:
        """Test if `step` comes before `other` (the current step by default)."""
        return self.step_index(step) < self.step_index(other)

    def step_after(self, step: StepId, other: Optional[StepId] = None) -> bool:
        """Test if `step` comes after `other` (the current step by default)."""
        return self.step_index(step) > self.step_index(other)

    def first_step(self, *steps: Any) -> Optional[StepId]:
        """First declared step, or the earliest of the given steps (None entries ignored)."""
        if not steps:
            return self.steps()[0]
        return min(_flatten(steps), key=self.step_index, default=None)

    def last_step(self, *steps: Any) -> Optional[StepId]:
        """Last declared step, or the latest of the given steps (None entries ignored)."""
        if not steps:
            return self.steps()[-1]
        return max(_flatten(steps), key=self.step_index, default=None)

    def is_first_step(self, step: Optional[StepId] = None) -> bool:
        return self.step_index(step) == 0

    def is_last_step(self, step: Optional[StepId] = None) -> bool:
        return self.step_index(step) == len(self.form_steps) - 1

    # ------------------------------------------------------------------
    # Neighbours
    # ------------------------------------------------------------------

    def previous_steps(self, step: Optional[StepId] = None) -> List[StepId]:
        return list(self.steps()[: self.step_index(step)])

    def next_steps(self, step: Optional[StepId] = None) -> List[StepId]:
        return list(self.steps()[self.step_index(step) + 1:])

    def previous_step(self, step: Optional[StepId] = None) -> Optional[StepId]:
        steps = self.previous_steps(step)
        return steps[-1] if steps else None

    def next_step(self, step: Optional[StepId] = None) -> Optional[StepId]:
        steps = self.next_steps(step)
        return steps[0] if steps else None

    # ------------------------------------------------------------------
    # Field partition
    # ------------------------------------------------------------------

    def step_params(self, step: Optional[StepId] = None) -> Tuple["StepParam", ...]:
        step = self._step(step)
        self.form_steps.index(step)
        return tuple(p for p in self.form.params() if p.step == step)

    def current_params(self) -> Tuple["StepParam", ...]:
        return self.step_params(self.step)

    def other_params(self) -> Tuple["StepParam", ...]:
        return tuple(p for p in self.form.params() if p.step != self.step)

    # ------------------------------------------------------------------
    # Content predicates
    # ------------------------------------------------------------------

    def is_extra_step(self, step: Optional[StepId] = None) -> bool:
        return not self.step_params(step)

    def is_regular_step(self, step: Optional[StepId] = None) -> bool:
        return not self.is_extra_step(step)

    def is_required_step(self, step: Optional[StepId] = None) -> bool:
        """Considered false for steps without fields."""
        return any(p.required for p in self.step_params(step))

    def is_optional_step(self, step: Optional[StepId] = None) -> bool:
        return not self.is_required_step(step)

    def is_filled_step(self, step: Optional[StepId] = None) -> bool:
        """Considered true for steps without fields."""
        params = self.step_params(step)
        return not params or any(p.filled for p in params)

    def is_unfilled_step(self, step: Optional[StepId] = None) -> bool:
        return not self.is_filled_step(step)

    def is_correct_step(self, step: Optional[StepId] = None) -> bool:
        """Considered true for steps without fields."""
        params = self.step_params(step)
        return not params or bool(self.form.valid(params))

    def is_incorrect_step(self, step: Optional[StepId] = None) -> bool:
        """Considered false for steps without fields."""
        params = self.step_params(step)
        return bool(params) and bool(self.form.invalid(params))

    def is_enabled_step(self, step: Optional[StepId] = None) -> bool:
        """Considered true for steps without fields."""
        params = self.step_params(step)
        return not params or any(p.enabled for p in params)

    def is_disabled_step(self, step: Optional[StepId] = None) -> bool:
        """Considered false for steps without fields."""
        params = self.step_params(step)
        return bool(params) and all(p.disabled for p in params)

    # ------------------------------------------------------------------
    # Progress predicates
    # ------------------------------------------------------------------

    def is_unfinished_step(self, step: Optional[StepId] = None) -> bool:
        """Not yet visited, or visited for the first time."""
        index = self.step_index(self.seen) if self.seen is not None else -1
        return self.step_index(step) > index

    def is_finished_step(self, step: Optional[StepId] = None) -> bool:
        """Visited or skipped over before."""
        return not self.is_unfinished_step(step)

    def is_inaccessible_step(self, step: Optional[StepId] = None) -> bool:
        return self.step_index(step) > self.step_index(self.last)

    def is_accessible_step(self, step: Optional[StepId] = None) -> bool:
        return not self.is_inaccessible_step(step)

    # ------------------------------------------------------------------
    # Compound predicates
    # ------------------------------------------------------------------

    def is_complete_step(self, step: Optional[StepId] = None) -> bool:
        return self.is_finished_step(step) and self.is_correct_step(step)

    def is_incomplete_step(self, step: Optional[StepId] = None) -> bool:
        return self.is_finished_step(step) and self.is_incorrect_step(step)

    def is_good_step(self, step: Optional[StepId] = None) -> bool:
        """Shall be displayed as correct."""
        return self.is_complete_step(step) and self.is_filled_step(step) and self.is_regular_step(step)

    def is_bad_step(self, step: Optional[StepId] = None) -> bool:
        """Shall be displayed as incorrect."""
        return self.is_incomplete_step(step)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def _select(self, predicate: Callable[[StepId], bool], steps: Optional[Sequence[StepId]] = None) -> List[StepId]:
        return [s for s in (self.steps() if steps is None else steps) if predicate(s)]

    def _filter_steps(self, predicate: Callable[[Tuple["StepParam", ...]], bool]) -> List[StepId]:
        # Steps without fields never match.
        out: List[StepId] = []
        for step in self.steps():
            params = self.step_params(step)
            if params and predicate(params):
                out.append(step)
        return out

    def extra_steps(self) -> List[StepId]:
        return self._select(self.is_extra_step)

    def regular_steps(self) -> List[StepId]:
        return self._select(self.is_regular_step)

    def required_steps(self) -> List[StepId]:
        return self._filter_steps(lambda params: any(p.required for p in params))

    def optional_steps(self) -> List[StepId]:
        return self._filter_steps(lambda params: not any(p.required for p in params))

    def filled_steps(self) -> List[StepId]:
        return self._filter_steps(lambda params: any(p.filled for p in params))

    def unfilled_steps(self) -> List[StepId]:
        return self._filter_steps(lambda params: not any(p.filled for p in params))

    def correct_steps(self) -> List[StepId]:
        return self._filter_steps(lambda params: bool(self.form.valid(params)))

    def incorrect_steps(self) -> List[StepId]:
        return self._filter_steps(lambda params: bool(self.form.invalid(params)))

    def incorrect_step(self) -> Optional[StepId]:
        """First step with invalid data, or None if there is none."""
        steps = self.incorrect_steps()
        return steps[0] if steps else None

    def enabled_steps(self) -> List[StepId]:
        return self._filter_steps(lambda params: any(p.enabled for p in params))

    def disabled_steps(self) -> List[StepId]:
        return self._filter_steps(lambda params: all(p.disabled for p in params))

    def unfinished_steps(self) -> List[StepId]:
        return self._select(self.is_unfinished_step)

    def finished_steps(self) -> List[StepId]:
        return self._select(self.is_finished_step)

    def inaccessible_steps(self) -> List[StepId]:
        """Steps past the last accessible one."""
        return self.next_steps(self.last)

    def accessible_steps(self) -> List[StepId]:
        """Steps up to and including the last accessible one."""
        return list(self.steps()[: self.step_index(self.last) + 1])

    def complete_steps(self) -> List[StepId]:
        return self._select(self.is_correct_step, self.finished_steps())

    def incomplete_steps(self) -> List[StepId]:
        return self._select(self.is_incorrect_step, self.finished_steps())

    def good_steps(self) -> List[StepId]:
        return self._select(self.is_good_step)

    def bad_steps(self) -> List[StepId]:
        return self._select(self.is_bad_step)

    # ------------------------------------------------------------------
    # Sidebar
    # ------------------------------------------------------------------

    def step_status(self, step: Optional[StepId] = None) -> StepStatus:
        step = self._step(step)
        return StepStatus(
            step=step,
            label=self.form_steps.label(step),
            index=self.step_index(step),
            current=step == self.step,
            extra=self.is_extra_step(step),
            accessible=self.is_accessible_step(step),
            finished=self.is_finished_step(step),
            good=self.is_good_step(step),
            bad=self.is_bad_step(step),
        )

    def step_statuses(self) -> List[StepStatus]:
        return [self.step_status(s) for s in self.steps()]

    def __repr__(self) -> str:
        return f"StepController(step={self.step!r}, last={self.last!r}, seen={self.seen!r})"
