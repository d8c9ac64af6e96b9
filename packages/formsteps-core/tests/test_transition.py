from __future__ import annotations

from enum import Enum

import pytest

from formsteps.core.controller import StepController
from formsteps.core.forms.static import StaticForm, StaticParam
from formsteps.core.registry.steps import StepRegistry
from formsteps.core.runtime.settings import Settings
from formsteps.core.state import StepState


def test_fresh_instance_starts_on_first_step(make_form):
    ctl = make_form(a_valid=False, a_filled=False).steps
    assert (ctl.step, ctl.last, ctl.seen) == ("a", "a", "a")
    assert ctl.accessible_steps() == ["a"]
    assert ctl.extra_steps() == ["c"]


def test_fresh_instance_with_valid_first_step_does_not_move(make_form):
    ctl = make_form().steps
    assert (ctl.step, ctl.last, ctl.seen) == ("a", "a", "a")


def test_valid_submission_advances_to_requested_step(make_form):
    ctl = make_form(StepState(step="a", next="b")).steps
    assert ctl.step == "b"
    assert ctl.last == "b"
    assert ctl.seen == "a"
    assert "a" in ctl.complete_steps()
    assert "a" in ctl.good_steps()
    assert ctl.accessible_steps() == ["a", "b"]


def test_invalid_submission_stays_on_step(make_form):
    ctl = make_form(StepState(step="a", next="b", last="a", seen="a"), a_valid=False).steps
    assert ctl.step == "a"
    assert ctl.last == "a"
    assert ctl.seen == "a"
    assert ctl.bad_steps() == ["a"]
    assert ctl.incorrect_step() == "a"


def test_going_back_keeps_progress(make_form):
    ctl = make_form(StepState(step="b", next="a", last="b", seen="a"), b_valid=True, b_filled=True).steps
    assert ctl.step == "a"
    assert ctl.last == "b"
    assert ctl.seen == "b"


def test_invalid_step_blocks_going_back_too(make_form):
    ctl = make_form(StepState(step="b", next="a", last="b", seen="a")).steps
    assert ctl.step == "b"


def test_jump_ahead_is_recorded_not_enforced(make_form):
    ctl = make_form(StepState(step="a", next="c")).steps
    assert ctl.step == "c"
    assert ctl.last == "c"
    assert ctl.seen == "b"


def test_untrusted_values_fall_back_to_defaults(make_form):
    ctl = make_form(StepState(step="zzz", next="../etc", last="bogus", seen="42"), a_valid=False).steps
    assert (ctl.step, ctl.last, ctl.seen) == ("a", "a", "a")


def test_invalid_next_means_stay(make_form):
    ctl = make_form(StepState(step="b", next="nope", last="b", seen="a"), b_valid=True, b_filled=True).steps
    assert ctl.step == "b"
    assert ctl.seen == "b"


def test_last_never_behind_seen_for_tampered_input(make_form):
    ctl = make_form(StepState(step="c", next="a", last="a")).steps
    assert ctl.step == "a"
    assert ctl.step_index(ctl.last) >= ctl.step_index(ctl.seen)
    assert ctl.last == "c"


def test_round_trips_never_regress(make_form):
    submissions = [
        ("b", {"a_valid": True}),
        ("c", {"b_valid": False}),
        ("c", {"b_valid": True, "b_filled": True}),
        ("a", {}),
        ("b", {"a_valid": False}),
        ("b", {}),
    ]
    fields = {}
    prev_last = prev_seen = -1
    for requested, kwargs in submissions:
        state = StepState.from_fields({**fields, "next": requested})
        ctl = make_form(state, **kwargs).steps
        last, seen = ctl.step_index(ctl.last), ctl.step_index(ctl.seen)
        assert last >= prev_last
        assert seen >= prev_seen
        assert last >= seen
        prev_last, prev_seen = last, seen
        fields = ctl.to_fields()
    assert ctl.last == "c"


def test_mapping_state_uses_field_prefix(registry):
    settings = Settings(field_prefix="wiz_")
    params = [StaticParam(name="email", step="a", filled=True)]
    form = StaticForm(params, registry=registry, state={"wiz_step": "a", "wiz_next": "b", "step": "c"}, settings=settings)
    assert form.steps.step == "b"
    assert form.steps.to_fields() == {"wiz_step": "b", "wiz_last": "b", "wiz_seen": "a"}


def test_state_is_echoed_without_next(make_form):
    ctl = make_form(StepState(step="a", next="b")).steps
    assert ctl.state == StepState(step="b", last="b", seen="a")
    assert ctl.to_fields() == {"step": "b", "last": "b", "seen": "a"}


def test_unlock_steps(make_form):
    ctl = make_form(a_valid=False)
    steps = ctl.steps.unlock_steps()
    assert steps is ctl.steps
    assert steps.last == "c"
    assert steps.seen == "c"
    assert all(steps.is_accessible_step(s) for s in steps.steps())
    assert all(steps.is_finished_step(s) for s in steps.steps())
    assert steps.inaccessible_steps() == []
    assert steps.unfinished_steps() == []


def test_registry_from_form_type(settings):
    from formsteps.core.registry.steps import define_steps

    class SignupForm(StaticForm):
        pass

    define_steps(SignupForm, [("who", "Who"), ("done", None)])
    form = SignupForm([StaticParam(name="name", step="who", filled=True)], state={"next": "done"}, settings=settings)
    assert form.steps.step == "done"
    assert form.steps.form_steps.steps() == ("who", "done")


def test_transition_is_logged(make_form, caplog: pytest.LogCaptureFixture):
    caplog.set_level("DEBUG", logger="formsteps.core.controller")
    make_form(StepState(step="zzz", next="b"))
    messages = [r.getMessage() for r in caplog.records]
    assert any("Ignoring invalid step='zzz'" in m for m in messages)
    assert any(m.startswith("step_transition ") and "validated=True" in m for m in messages)


def test_controller_wraps_any_host_form(registry):
    class Host:
        def __init__(self, params):
            self._params = params

        def params(self):
            return self._params

        def valid(self, params):
            return all(getattr(p, "valid", True) for p in params)

        def invalid(self, params):
            return not self.valid(params)

    host = Host([StaticParam(name="x", step="b", required=True)])
    ctl = StepController(host, {"step": "a", "next": "b"}, registry=registry)
    assert ctl.step == "b"
    assert ctl.step_params("b") == tuple(host.params())


class Stage(str, Enum):
    INFO = "info"
    PAYMENT = "payment"
    CONFIRM = "confirm"


def test_str_enum_steps_survive_round_trips(settings):
    registry = StepRegistry({Stage.INFO: "Info", Stage.PAYMENT: "Payment", Stage.CONFIRM: None})

    def submit(fields):
        params = [
            StaticParam(name="email", step=Stage.INFO, required=True, filled=True),
            StaticParam(name="card", step=Stage.PAYMENT, required=True, valid=False),
        ]
        return StaticForm(params, registry=registry, state=fields, settings=settings).steps

    ctl = submit({"step": "info", "next": "payment"})
    assert ctl.step is Stage.PAYMENT
    assert ctl.to_fields() == {"step": "payment", "last": "payment", "seen": "info"}

    again = submit({**ctl.to_fields(), "next": "confirm"})
    assert again.step is Stage.PAYMENT
    assert again.last is Stage.PAYMENT
    assert again.seen is Stage.PAYMENT
    assert again.to_fields() == {"step": "payment", "last": "payment", "seen": "payment"}
