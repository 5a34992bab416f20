"""Mode and boost dispatch onto the governor control surface."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from power_hal.control import ControlSurface
from power_hal.types import Boost, Governor, Mode, Status, coerce_boost, coerce_mode

__all__ = [
    "BoostEngine",
    "MODE_POLICIES",
    "ModeEngine",
    "ModePolicy",
]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ModePolicy:
    """Governor written when a mode is enabled or disabled.

    ``None`` means the transition leaves the control surface untouched.
    """

    on: Governor | None = None
    off: Governor | None = None

    def target(self, enabled: bool) -> Governor | None:
        return self.on if enabled else self.off


_POWERSAVE = ModePolicy(on=Governor.POWERSAVE, off=Governor.INTERACTIVE)
_PERFORMANCE = ModePolicy(on=Governor.PERFORMANCE, off=Governor.INTERACTIVE)
_NO_EFFECT = ModePolicy()

MODE_POLICIES: Final[Mapping[Mode, ModePolicy]] = MappingProxyType(
    {
        Mode.DOUBLE_TAP_TO_WAKE: _NO_EFFECT,
        Mode.LOW_POWER: _POWERSAVE,
        Mode.SUSTAINED_PERFORMANCE: _NO_EFFECT,
        Mode.FIXED_PERFORMANCE: _PERFORMANCE,
        Mode.VR: _NO_EFFECT,
        Mode.LAUNCH: _PERFORMANCE,
        Mode.EXPENSIVE_RENDERING: _NO_EFFECT,
        Mode.INTERACTIVE: ModePolicy(on=Governor.INTERACTIVE),
        Mode.DEVICE_IDLE: _POWERSAVE,
        Mode.DISPLAY_INACTIVE: _NO_EFFECT,
        Mode.AUDIO_STREAMING_LOW_LATENCY: _NO_EFFECT,
        Mode.CAMERA_STREAMING_SECURE: _NO_EFFECT,
        Mode.CAMERA_STREAMING_LOW: _NO_EFFECT,
        Mode.CAMERA_STREAMING_MID: _NO_EFFECT,
        Mode.CAMERA_STREAMING_HIGH: _NO_EFFECT,
    }
)


@dataclass(slots=True)
class ModeEngine:
    """Translate mode transitions into governor writes."""

    surface: ControlSurface
    policies: Mapping[Mode, ModePolicy] = field(
        default_factory=lambda: MODE_POLICIES
    )
    logger: logging.Logger = field(default=LOGGER)

    def apply(self, mode: Mode | int | str, enabled: bool) -> Status:
        """Apply ``mode`` and report success.

        Unknown modes and transitions without a target governor perform no
        write. Write failures are logged by the control surface only.
        """

        resolved = coerce_mode(mode)
        self.logger.debug(
            "Power setMode",
            extra={
                "mode": resolved.name if resolved is not None else mode,
                "enabled": bool(enabled),
            },
        )
        if resolved is None:
            return Status.OK

        policy = self.policies.get(resolved, _NO_EFFECT)
        governor = policy.target(bool(enabled))
        if governor is None:
            return Status.OK

        outcomes = self.surface.write(governor.value)
        self.logger.debug(
            "Applied governor",
            extra={
                "mode": resolved.name,
                "governor": governor.value,
                "outcomes": {name: o.value for name, o in outcomes.items()},
            },
        )
        return Status.OK


@dataclass(slots=True)
class BoostEngine:
    """Accept boost hints.

    Boosts are advisory on every supported platform: they never touch the
    control surface and ``duration_ms`` is accepted but unused.
    """

    logger: logging.Logger = field(default=LOGGER)

    def apply(self, boost: Boost | int | str, duration_ms: int) -> Status:
        resolved = coerce_boost(boost)
        self.logger.debug(
            "Power setBoost",
            extra={
                "boost": resolved.name if resolved is not None else boost,
                "duration_ms": duration_ms,
            },
        )
        return Status.OK
