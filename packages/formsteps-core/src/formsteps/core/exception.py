"""Centralized customized exceptions for formsteps.

All project-specific exceptions live in this module. Internal code should
prefer explicit imports:

    from formsteps.core.exception import UnknownStepError

Untrusted round-trip values (the submitted step/last/seen fields) never raise
any of these; they fall back to defaults instead.
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "UnknownStepError",
]


class ConfigurationError(ValueError):
    """Raised when a step registry or a step definition file is declared invalidly."""


class UnknownStepError(KeyError):
    """Raised when a step id that is not declared in the registry is used as a key."""

    def __init__(self, step, *, known=()):
        msg = f"invalid step name {step!r}"
        if known:
            msg += f". Declared: {list(known)}"
        super().__init__(msg)
        self.step = step
        self.known = tuple(known)

    def __str__(self) -> str:
        return str(self.args[0])
