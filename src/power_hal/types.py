"""Enumerations shared by the power HAL core and its host endpoint."""

from __future__ import annotations

from enum import Enum, IntEnum, StrEnum
from typing import TypeVar

__all__ = [
    "Boost",
    "Governor",
    "Mode",
    "Status",
    "coerce_boost",
    "coerce_mode",
]


class Mode(IntEnum):
    """Power modes requested by the power-management authority.

    Values match the host interface's wire values.
    """

    DOUBLE_TAP_TO_WAKE = 0
    LOW_POWER = 1
    SUSTAINED_PERFORMANCE = 2
    FIXED_PERFORMANCE = 3
    VR = 4
    LAUNCH = 5
    EXPENSIVE_RENDERING = 6
    INTERACTIVE = 7
    DEVICE_IDLE = 8
    DISPLAY_INACTIVE = 9
    AUDIO_STREAMING_LOW_LATENCY = 10
    CAMERA_STREAMING_SECURE = 11
    CAMERA_STREAMING_LOW = 12
    CAMERA_STREAMING_MID = 13
    CAMERA_STREAMING_HIGH = 14


class Boost(IntEnum):
    """Short-lived boost hints."""

    INTERACTION = 0
    DISPLAY_UPDATE_IMMINENT = 1
    ML_ACC = 2
    AUDIO_LAUNCH = 3
    CAMERA_LAUNCH = 4
    CAMERA_SHOT = 5


class Governor(StrEnum):
    """cpufreq governor names written to ``scaling_governor``."""

    PERFORMANCE = "performance"
    POWERSAVE = "powersave"
    INTERACTIVE = "interactive"


class Status(Enum):
    """Result reported by command operations."""

    OK = "ok"


_E = TypeVar("_E", bound=IntEnum)


def _coerce(enum_cls: type[_E], value: object) -> _E | None:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, (bool, Enum)):
        return None
    if isinstance(value, int):
        try:
            return enum_cls(value)
        except ValueError:
            return None
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            return None
    return None


def coerce_mode(value: object) -> Mode | None:
    """Return the :class:`Mode` for ``value`` or ``None`` when it is unknown.

    Accepts enum members, wire integers, and member names (case-insensitive).
    """

    return _coerce(Mode, value)


def coerce_boost(value: object) -> Boost | None:
    """Return the :class:`Boost` for ``value`` or ``None`` when it is unknown."""

    return _coerce(Boost, value)
