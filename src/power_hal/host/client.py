"""Client for the power HAL socket endpoint."""

from __future__ import annotations

import socket
from pathlib import Path

from pydantic import ValidationError

from power_hal.host.protocol import PowerRequest, PowerResponse
from power_hal.settings import PowerHalSettings, get_settings
from power_hal.types import Boost, Mode

__all__ = ["PowerClient", "PowerServiceUnavailableError"]


class PowerServiceUnavailableError(RuntimeError):
    """Raised when the endpoint cannot be reached or answers nonsense."""


class PowerClient:
    """Blocking client mirroring the :class:`PowerService` operations."""

    def __init__(
        self,
        socket_path: Path | None = None,
        *,
        timeout: float | None = None,
        settings: PowerHalSettings | None = None,
    ) -> None:
        effective = settings or get_settings()
        self.socket_path = socket_path or Path(effective.socket_path)
        self.timeout = timeout if timeout is not None else effective.request_timeout

    def is_mode_supported(self, mode: Mode | int | str) -> bool:
        return bool(
            self.call(PowerRequest(op="is_mode_supported", mode=_wire(mode))).result
        )

    def is_boost_supported(self, boost: Boost | int | str) -> bool:
        return bool(
            self.call(PowerRequest(op="is_boost_supported", boost=_wire(boost))).result
        )

    def set_mode(self, mode: Mode | int | str, enabled: bool) -> None:
        self.call(PowerRequest(op="set_mode", mode=_wire(mode), enabled=enabled))

    def set_boost(self, boost: Boost | int | str, duration_ms: int) -> None:
        self.call(
            PowerRequest(op="set_boost", boost=_wire(boost), duration_ms=duration_ms)
        )

    def call(self, request: PowerRequest) -> PowerResponse:
        """Send ``request`` and return the decoded response.

        Raises:
            PowerServiceUnavailableError: On transport failure, a malformed
                reply, or an ``error`` status.
        """

        line = request.model_dump_json(exclude_none=True).encode("utf-8") + b"\n"
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                sock.settimeout(self.timeout)
                sock.connect(str(self.socket_path))
                sock.sendall(line)
                payload = self._recv_line(sock)
        except OSError as exc:
            raise PowerServiceUnavailableError(
                f"Failed to reach power HAL at {self.socket_path}: {exc}"
            ) from exc

        try:
            response = PowerResponse.model_validate_json(payload)
        except ValidationError as exc:
            raise PowerServiceUnavailableError("Invalid power HAL response") from exc

        if response.status == "error":
            raise PowerServiceUnavailableError(response.error or "request rejected")
        return response

    @staticmethod
    def _recv_line(sock: socket.socket) -> bytes:
        buffer = bytearray()
        while b"\n" not in buffer:
            chunk = sock.recv(4096)
            if not chunk:
                break
            buffer.extend(chunk)
        if not buffer:
            raise PowerServiceUnavailableError("Power HAL returned empty response")
        return bytes(buffer.split(b"\n", 1)[0])


def _wire(value: Mode | Boost | int | str) -> int | str:
    if isinstance(value, (Mode, Boost)):
        return value.name
    return value
