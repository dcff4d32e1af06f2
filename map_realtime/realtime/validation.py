"""
Inbound payload validation for the positions socket.

Rejected payloads are dropped without telling the sender. Internally every
check still returns an `Outcome` carrying the reason, so callers and tests can
tell a malformed payload from a throttled or orphaned one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictStr, StringConstraints, ValidationError


# Counted in Unicode code points after trimming.
NAME_MAX_LENGTH = 64


class Rejection(str, Enum):
    INVALID_PAYLOAD = "invalid_payload"
    THROTTLED = "throttled"
    UNKNOWN_SESSION = "unknown_session"


@dataclass(frozen=True)
class Outcome:
    accepted: bool
    reason: Optional[Rejection] = None
    detail: Optional[str] = None

    @classmethod
    def ok(cls) -> "Outcome":
        return cls(accepted=True)

    @classmethod
    def rejected(cls, reason: Rejection, detail: Optional[str] = None) -> "Outcome":
        return cls(accepted=False, reason=reason, detail=detail)


DisplayName = Annotated[
    StrictStr,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=NAME_MAX_LENGTH),
]


class JoinPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: DisplayName


class UpdateLocationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    # strict: numeric strings and booleans are not coordinates
    lat: float = Field(ge=-90, le=90, strict=True, allow_inf_nan=False)
    lng: float = Field(ge=-180, le=180, strict=True, allow_inf_nan=False)


M = TypeVar("M", bound=BaseModel)


def validate_join(payload: Any) -> Tuple[Optional[JoinPayload], Outcome]:
    return _validate(JoinPayload, payload)


def validate_update(payload: Any) -> Tuple[Optional[UpdateLocationPayload], Outcome]:
    return _validate(UpdateLocationPayload, payload)


def _validate(model: Type[M], payload: Any) -> Tuple[Optional[M], Outcome]:
    try:
        return model.model_validate(payload), Outcome.ok()
    except ValidationError as e:
        fields = ",".join(".".join(str(p) for p in err["loc"]) or "<root>" for err in e.errors())
        return None, Outcome.rejected(Rejection.INVALID_PAYLOAD, detail=fields)
