"""Unix socket endpoint and daemon hosting the power HAL."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "PowerClient",
    "PowerRequest",
    "PowerResponse",
    "PowerServiceUnavailableError",
    "run_daemon",
    "start_ipc_server",
]

if TYPE_CHECKING:
    from .client import PowerClient, PowerServiceUnavailableError
    from .daemon import run_daemon
    from .protocol import PowerRequest, PowerResponse
    from .server import start_ipc_server


def __getattr__(name: str) -> Any:
    """Lazily resolve endpoint symbols to keep ``import power_hal.host`` cheap."""

    module_map = {
        "PowerClient": "client",
        "PowerServiceUnavailableError": "client",
        "PowerRequest": "protocol",
        "PowerResponse": "protocol",
        "run_daemon": "daemon",
        "start_ipc_server": "server",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
