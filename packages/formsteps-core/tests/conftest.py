import textwrap
from pathlib import Path

import sys

# Allow running tests without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import pytest
from formsteps.core.forms.static import StaticForm, StaticParam
from formsteps.core.registry.steps import StepRegistry
from formsteps.core.runtime.settings import Settings


@pytest.fixture()
def settings():
    return Settings(log_level="DEBUG", log_format="text")


@pytest.fixture()
def registry():
    # c is an instructions-only page without fields.
    return StepRegistry({"a": "Info", "b": "Payment", "c": None})


def make_params(*, a_valid=True, a_filled=True, b_valid=False, b_filled=False):
    return [
        StaticParam(name="email", step="a", required=True, filled=a_filled, valid=a_valid),
        StaticParam(name="nickname", step="a", filled=False),
        StaticParam(name="card", step="b", required=True, filled=b_filled, valid=b_valid),
        StaticParam(name="csrf", step=None, filled=True),
    ]


@pytest.fixture()
def make_form(registry, settings):
    def _make(state=None, **kwargs):
        return StaticForm(make_params(**kwargs), registry=registry, state=state, settings=settings)
    return _make


@pytest.fixture()
def write_yaml(tmp_path: Path):
    def _write(name: str, yaml_text: str) -> Path:
        p = tmp_path / name
        p.write_text(textwrap.dedent(yaml_text).strip() + "\n", encoding="utf-8")
        return p
    return _write
