from __future__ import annotations

from formsteps.core.state import StepState


def test_from_fields_reads_reserved_names_only():
    st = StepState.from_fields({"step": "b", "next": "c", "last": "c", "seen": "a", "email": "x@example.com"})
    assert st == StepState(step="b", next="c", last="c", seen="a")


def test_from_fields_tolerates_garbage():
    st = StepState.from_fields({"step": 3, "next": ["a", "b"], "last": "", "seen": []})
    assert st.step == "3"
    assert st.next == "b"
    assert st.last is None
    assert st.seen is None
    assert StepState.from_fields(None) == StepState()


def test_from_fields_with_prefix():
    st = StepState.from_fields({"wiz_step": "a", "step": "ignored"}, prefix="wiz_")
    assert st.step == "a"


def test_to_fields_drops_next_and_missing_values():
    st = StepState(step="b", next="c", last="b")
    assert st.to_fields() == {"step": "b", "last": "b"}
    assert st.to_fields(prefix="w_") == {"w_step": "b", "w_last": "b"}


class _MultiDict(dict):
    """Minimal multi-value mapping: get() returns the first value, like werkzeug."""

    def get(self, key, default=None):
        values = super().get(key)
        return values[0] if values else default

    def getlist(self, key):
        return list(super().get(key, []))


def test_from_fields_reads_repeated_values_through_getlist():
    st = StepState.from_fields(_MultiDict({"step": ["a", "b"], "seen": ["a"]}))
    assert st.step == "b"
    assert st.seen == "a"
    assert st.next is None
    assert st.last is None
