"""Public, stable API surface for formsteps.

If you're integrating step tracking into a host form framework, import from
**`formsteps.core.api`**.

Everything outside this package is considered internal and may change without
notice, even in minor releases.
"""

from __future__ import annotations

# Step tracking
from formsteps.core.controller import StepController, StepStatus
# Common exceptions
from formsteps.core.exception import ConfigurationError, UnknownStepError
# Host form contract + reference host
from formsteps.core.forms.base import HasSteps, StepForm, StepParam
from formsteps.core.forms.static import StaticForm, StaticParam
# Registry
from formsteps.core.registry.steps import StepRegistry, define_steps, form_steps
# Settings
from formsteps.core.runtime.settings import Settings, load_settings
# Definition files (Pydantic models)
from formsteps.core.spec import FieldSpec, StepDefSpec, StepsFileSpec
# Round-trip state
from formsteps.core.state import StepState
from formsteps.core.validation import load_form_yaml, load_steps_yaml, validate_steps_yaml

__all__ = [
    # controller
    "StepController",
    "StepStatus",
    "StepState",
    # registry
    "StepRegistry",
    "define_steps",
    "form_steps",
    # host forms
    "StepForm",
    "StepParam",
    "HasSteps",
    "StaticForm",
    "StaticParam",
    # settings
    "Settings",
    "load_settings",
    # spec
    "StepsFileSpec",
    "StepDefSpec",
    "FieldSpec",
    "load_steps_yaml",
    "load_form_yaml",
    "validate_steps_yaml",
    # exceptions
    "ConfigurationError",
    "UnknownStepError",
]
