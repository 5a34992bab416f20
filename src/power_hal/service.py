"""Query and command entry points of the power HAL."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from threading import Lock

from power_hal.capabilities import (
    CAPABILITY_TABLE,
    CapabilityMasks,
    PlatformCapabilities,
    lookup,
)
from power_hal.control import create_governor_surface
from power_hal.engine import BoostEngine, ModeEngine
from power_hal.platform import PlatformDetector
from power_hal.properties import read_property
from power_hal.settings import PowerHalSettings, get_settings
from power_hal.types import Boost, Mode, Status, coerce_boost, coerce_mode

__all__ = ["PowerService", "create_power_service", "get_power_service"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class PowerService:
    """Answer capability queries and dispatch mode/boost commands.

    Capability masks are looked up once, right after the platform is first
    resolved, and reused for the life of the service. No method raises.
    """

    detector: PlatformDetector
    mode_engine: ModeEngine
    boost_engine: BoostEngine = field(default_factory=BoostEngine)
    table: Mapping[str, PlatformCapabilities] = field(
        default_factory=lambda: CAPABILITY_TABLE
    )
    logger: logging.Logger = field(default=LOGGER)
    _masks: CapabilityMasks | None = field(init=False, default=None)
    _lock: Lock = field(init=False, default_factory=Lock)

    def capabilities(self) -> CapabilityMasks:
        """Return the cached masks for the running platform."""

        masks = self._masks
        if masks is not None:
            return masks

        with self._lock:
            if self._masks is None:
                platform = self.detector.resolve_platform()
                self._masks = lookup(platform, self.table)
                if not self._masks.is_resolved:
                    self.logger.warning(
                        "Platform not in capability table",
                        extra={"platform": platform},
                    )
            return self._masks

    def is_mode_supported(self, mode: Mode | int | str) -> bool:
        resolved = coerce_mode(mode)
        supported = (
            resolved is not None and self.capabilities().supports_mode(resolved)
        )
        self.logger.info(
            "Power isModeSupported",
            extra={"mode": mode, "supported": supported},
        )
        return supported

    def is_boost_supported(self, boost: Boost | int | str) -> bool:
        resolved = coerce_boost(boost)
        supported = (
            resolved is not None and self.capabilities().supports_boost(resolved)
        )
        self.logger.info(
            "Power isBoostSupported",
            extra={"boost": boost, "supported": supported},
        )
        return supported

    def set_mode(self, mode: Mode | int | str, enabled: bool) -> Status:
        return self.mode_engine.apply(mode, enabled)

    def set_boost(self, boost: Boost | int | str, duration_ms: int) -> Status:
        return self.boost_engine.apply(boost, duration_ms)


def create_power_service(settings: PowerHalSettings | None = None) -> PowerService:
    """Wire a :class:`PowerService` from settings.

    Args:
        settings: Optional settings override; defaults to the environment.

    Returns:
        A service reading the configured platform property and writing the
        configured cluster governor paths.
    """

    effective = settings or get_settings()

    def _reader(name: str, default: str) -> str:
        return read_property(name, default, settings=effective)

    detector = PlatformDetector(
        property_name=effective.platform_property, reader=_reader
    )
    return PowerService(
        detector=detector,
        mode_engine=ModeEngine(surface=create_governor_surface(effective)),
    )


_default_service: PowerService | None = None
_default_lock = Lock()


def get_power_service() -> PowerService:
    """Return the process-wide service, creating it on first use."""

    global _default_service
    service = _default_service
    if service is not None:
        return service
    with _default_lock:
        if _default_service is None:
            _default_service = create_power_service()
        return _default_service
