"""Platform power HAL: capability queries and governor-backed power modes."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "Boost",
    "Mode",
    "PowerService",
    "Status",
    "create_power_service",
    "get_power_service",
]

if TYPE_CHECKING:
    from .service import PowerService, create_power_service, get_power_service
    from .types import Boost, Mode, Status


def __getattr__(name: str) -> Any:
    """Lazily import submodules so settings are read only when needed."""

    module_map = {
        "Boost": "types",
        "Mode": "types",
        "Status": "types",
        "PowerService": "service",
        "create_power_service": "service",
        "get_power_service": "service",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
