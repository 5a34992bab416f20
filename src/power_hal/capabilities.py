"""Static platform capability table.

Each row names the modes and boosts a platform supports. Integer masks are
derived from the bit layout below so the values stay bit-for-bit compatible
with registries that exchange the raw masks.

Mode bits, most significant first::

    DOUBLE_TAP_TO_WAKE(14) LOW_POWER(13) SUSTAINED_PERFORMANCE(12)
    FIXED_PERFORMANCE(11) VR(10) LAUNCH(9) EXPENSIVE_RENDERING(8)
    INTERACTIVE(7) DEVICE_IDLE(6) DISPLAY_INACTIVE(5)
    AUDIO_STREAMING_LOW_LATENCY(4) CAMERA_STREAMING_SECURE(3)
    CAMERA_STREAMING_LOW(2) CAMERA_STREAMING_MID(1) CAMERA_STREAMING_HIGH(0)

Boost bits 7 and 6 are placeholders; the six boosts occupy bits 5 to 0.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from power_hal.types import Boost, Mode

__all__ = [
    "BOOST_BITS",
    "CAPABILITY_TABLE",
    "MODE_BITS",
    "UNRESOLVED",
    "UNRESOLVED_MASK",
    "CapabilityMasks",
    "PlatformCapabilities",
    "boost_mask_for",
    "lookup",
    "mode_mask_for",
]

UNRESOLVED_MASK: Final[int] = -1

MODE_BITS: Final[Mapping[Mode, int]] = MappingProxyType(
    {mode: 14 - mode.value for mode in Mode}
)
BOOST_BITS: Final[Mapping[Boost, int]] = MappingProxyType(
    {boost: 5 - boost.value for boost in Boost}
)


def mode_mask_for(modes: Iterable[Mode]) -> int:
    """Encode ``modes`` as an integer mode-support mask."""

    mask = 0
    for mode in modes:
        mask |= 1 << MODE_BITS[mode]
    return mask


def boost_mask_for(boosts: Iterable[Boost]) -> int:
    """Encode ``boosts`` as an integer boost-support mask."""

    mask = 0
    for boost in boosts:
        mask |= 1 << BOOST_BITS[boost]
    return mask


@dataclass(slots=True, frozen=True)
class PlatformCapabilities:
    """Named capability flags for one platform."""

    modes: frozenset[Mode]
    boosts: frozenset[Boost]

    @property
    def masks(self) -> CapabilityMasks:
        return CapabilityMasks(
            mode_mask=mode_mask_for(self.modes),
            boost_mask=boost_mask_for(self.boosts),
        )


@dataclass(slots=True, frozen=True)
class CapabilityMasks:
    """Mode and boost support masks for a resolved platform."""

    mode_mask: int
    boost_mask: int

    @property
    def is_resolved(self) -> bool:
        return self.mode_mask >= 0 and self.boost_mask >= 0

    def supports_mode(self, mode: Mode) -> bool:
        """Return whether the bit assigned to ``mode`` is set."""

        if self.mode_mask < 0:
            return False
        bit = MODE_BITS.get(mode)
        if bit is None:
            return False
        return bool(self.mode_mask & (1 << bit))

    def supports_boost(self, boost: Boost) -> bool:
        """Return whether the bit assigned to ``boost`` is set."""

        if self.boost_mask < 0:
            return False
        bit = BOOST_BITS.get(boost)
        if bit is None:
            return False
        return bool(self.boost_mask & (1 << bit))


UNRESOLVED: Final[CapabilityMasks] = CapabilityMasks(
    mode_mask=UNRESOLVED_MASK, boost_mask=UNRESOLVED_MASK
)

CAPABILITY_TABLE: Final[Mapping[str, PlatformCapabilities]] = MappingProxyType(
    {
        "rk3399": PlatformCapabilities(
            modes=frozenset(Mode) - {Mode.DOUBLE_TAP_TO_WAKE},
            boosts=frozenset(Boost),
        ),
    }
)


def lookup(
    platform: str,
    table: Mapping[str, PlatformCapabilities] = CAPABILITY_TABLE,
) -> CapabilityMasks:
    """Return the capability masks for ``platform``.

    Args:
        platform: Platform identifier produced by the detector.
        table: Capability rows to consult. Defaults to the built-in table.

    Returns:
        The platform's masks, or :data:`UNRESOLVED` when it is not listed.
    """

    row = table.get(platform)
    if row is None:
        return UNRESOLVED
    return row.masks
