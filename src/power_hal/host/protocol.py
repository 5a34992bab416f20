"""Wire models for the power HAL socket endpoint.

One JSON object per line in each direction. Requests name an operation and
its arguments; responses carry ``status`` and, for queries, ``result``.
"""

from __future__ import annotations

import json
from typing import Final, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    model_validator,
)

from power_hal.service import PowerService

__all__ = [
    "Operation",
    "PowerRequest",
    "PowerResponse",
    "dispatch",
    "handle_payload",
]

Operation = Literal["is_mode_supported", "is_boost_supported", "set_mode", "set_boost"]

INT32_MIN: Final[int] = -(2**31)
INT32_MAX: Final[int] = 2**31 - 1


class PowerRequest(BaseModel):
    """A single endpoint request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    op: Operation
    mode: StrictInt | str | None = Field(
        default=None, description="Mode name or wire value."
    )
    boost: StrictInt | str | None = Field(
        default=None, description="Boost name or wire value."
    )
    enabled: bool | None = Field(
        default=None, description="Target state for set_mode."
    )
    duration_ms: int = Field(
        default=0, ge=INT32_MIN, le=INT32_MAX, description="Boost duration hint."
    )

    @model_validator(mode="after")
    def _check_arguments(self) -> PowerRequest:
        if self.op in ("is_mode_supported", "set_mode") and self.mode is None:
            raise ValueError(f"'{self.op}' requires 'mode'")
        if self.op == "set_mode" and self.enabled is None:
            raise ValueError("'set_mode' requires 'enabled'")
        if self.op in ("is_boost_supported", "set_boost") and self.boost is None:
            raise ValueError(f"'{self.op}' requires 'boost'")
        return self


class PowerResponse(BaseModel):
    """A single endpoint response."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: Literal["ok", "error"]
    result: bool | None = None
    error: str | None = None

    def to_line(self) -> bytes:
        body = self.model_dump(mode="json", exclude_none=True)
        return json.dumps(body, separators=(",", ":")).encode("utf-8") + b"\n"


def dispatch(service: PowerService, request: PowerRequest) -> PowerResponse:
    """Run ``request`` against ``service``.

    Names and wire values are both accepted; unknown values flow through to
    the service, which answers ``False`` or performs no action.
    """

    match request.op:
        case "is_mode_supported":
            return PowerResponse(
                status="ok", result=service.is_mode_supported(_wire(request.mode))
            )
        case "is_boost_supported":
            return PowerResponse(
                status="ok", result=service.is_boost_supported(_wire(request.boost))
            )
        case "set_mode":
            service.set_mode(_wire(request.mode), bool(request.enabled))
        case "set_boost":
            service.set_boost(_wire(request.boost), request.duration_ms)
    return PowerResponse(status="ok")


def handle_payload(service: PowerService, payload: bytes) -> PowerResponse:
    """Decode, validate and dispatch a raw request line."""

    try:
        request = PowerRequest.model_validate_json(payload)
    except ValidationError as exc:
        return PowerResponse(status="error", error=_describe(exc))
    return dispatch(service, request)


def _wire(value: int | str | None) -> int | str:
    return -1 if value is None else value


def _describe(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return "invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "request"
    return f"{location}: {first.get('msg', 'invalid value')}"
