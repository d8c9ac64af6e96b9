from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, field_validator
from pydantic.config import ConfigDict

# Reserved round-trip field names. "next" is input-only and never re-emitted.
STATE_FIELDS = ("step", "next", "last", "seen")
DURABLE_FIELDS = ("step", "last", "seen")


class StepState(BaseModel):
    """The step/next/last/seen values carried between requests.

    Values are untrusted echoes from the client; they are kept as plain strings
    here and only matched against the declared steps by the controller.
    """

    model_config = ConfigDict(frozen=True)

    step: Optional[str] = None
    next: Optional[str] = None
    last: Optional[str] = None
    seen: Optional[str] = None

    @field_validator("step", "next", "last", "seen", mode="before")
    @classmethod
    def _scalar(cls, v: Any) -> Optional[str]:
        # Repeated form fields arrive as lists; the last value wins.
        if isinstance(v, (list, tuple)):
            v = v[-1] if v else None
        if v is None:
            return None
        if isinstance(v, Enum):
            # str-based enum step ids round-trip by value, not "Cls.MEMBER"
            v = v.value
        v = str(v)
        return v or None

    @classmethod
    def from_fields(cls, data: Mapping[str, Any] | None, *, prefix: str = "") -> "StepState":
        """Read the round-trip fields from request data.

        Multi-value mappings exposing getlist() (werkzeug MultiDict, Django
        QueryDict) are read through it so repeated fields use their last value.
        """
        data = data or {}
        getlist = getattr(data, "getlist", None)
        if callable(getlist):
            return cls(**{name: getlist(prefix + name) for name in STATE_FIELDS})
        return cls(**{name: data.get(prefix + name) for name in STATE_FIELDS})

    def to_fields(self, *, prefix: str = "") -> Dict[str, str]:
        out: Dict[str, str] = {}
        for name in DURABLE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                out[prefix + name] = value
        return out
