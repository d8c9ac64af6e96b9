from __future__ import annotations

import os
from importlib import import_module

from pydantic import BaseModel


class Settings(BaseModel):
    # Defaults are static. Use load_settings(env=...) to read from an env snapshot.
    log_level: str = "INFO"

    # Observability
    # - log_format: "text" (default) or "json". When json, formsteps logs emit a single JSON
    #   object per line, suitable for log aggregation.
    log_format: str = "text"

    # Prefix for the hidden round-trip fields (step/next/last/seen), e.g. "wizard_"
    # when the host form already owns a field named "step".
    field_prefix: str = ""

    @classmethod
    def from_env(cls, env: dict[str, str], overrides: dict | None = None) -> "Settings":
        """Build Settings from an explicit env snapshot (does not read os.environ)."""
        def g(key: str, default: str | None = None) -> str | None:
            return env.get(key, default)  # type: ignore[return-value]

        data = {
            "log_level": g("FORMSTEPS_LOG_LEVEL", "INFO"),
            "log_format": g("FORMSTEPS_LOG_FORMAT", "text"),
            "field_prefix": g("FORMSTEPS_FIELD_PREFIX", ""),
        }
        if overrides:
            data.update(overrides)
        return cls(**data)


def load_settings(overrides: dict | None = None, *, env: dict[str, str] | None = None) -> Settings:
    """Load settings from (1) env snapshot, (2) optional settings module, (3) explicit overrides.

    If env is not provided, we build a snapshot from os.environ.
    """
    env2 = {k: str(v) for k, v in os.environ.items()} if env is None else env
    s = Settings.from_env(env2)
    mod = env2.get("FORMSTEPS_SETTINGS_MODULE")
    if mod:
        m = import_module(mod)
        data = getattr(m, "SETTINGS", {})
        if not isinstance(data, dict):
            raise TypeError("FORMSTEPS_SETTINGS_MODULE must expose SETTINGS: dict")
        s = s.model_copy(update=data)
    if overrides:
        s = s.model_copy(update=overrides)
    return s
