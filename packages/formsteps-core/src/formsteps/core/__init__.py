"""formsteps core package.

Public entrypoints:
- formsteps.core.api: stable API surface for host form integrations
- formsteps.core.StepController / StepRegistry: step tracking for multi-step forms

Internal modules may change without notice.
"""

from __future__ import annotations

from formsteps.core.controller import StepController
from formsteps.core.registry.steps import StepRegistry

__all__ = ["StepController", "StepRegistry"]
