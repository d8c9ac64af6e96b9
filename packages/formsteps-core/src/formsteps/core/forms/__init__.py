from __future__ import annotations

from formsteps.core.forms.base import HasSteps, StepForm, StepParam
from formsteps.core.forms.static import StaticForm, StaticParam

__all__ = [
    "HasSteps",
    "StepForm",
    "StepParam",
    "StaticForm",
    "StaticParam",
]
