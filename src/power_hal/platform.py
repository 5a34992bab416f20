"""One-time platform detection."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from threading import Lock
from typing import Final

from power_hal.properties import read_property

__all__ = ["UNKNOWN_PLATFORM", "PlatformDetector", "PropertyReader"]

LOGGER = logging.getLogger(__name__)

UNKNOWN_PLATFORM: Final[str] = "unknown"

PropertyReader = Callable[[str, str], str]


@dataclass(slots=True)
class PlatformDetector:
    """Resolve the running hardware platform once and cache it.

    Concurrent first calls are serialised so ``reader`` runs exactly once per
    detector.
    """

    property_name: str = "ro.boot.hardware"
    reader: PropertyReader = field(default=read_property)
    logger: logging.Logger = field(default=LOGGER)
    _platform: str | None = field(init=False, default=None)
    _lock: Lock = field(init=False, default_factory=Lock)

    @property
    def resolved(self) -> bool:
        return self._platform is not None

    def resolve_platform(self) -> str:
        """Return the platform identifier, reading it on first use.

        Returns:
            The stripped property value, or :data:`UNKNOWN_PLATFORM` when the
            property is empty or cannot be read.
        """

        platform = self._platform
        if platform is not None:
            return platform

        with self._lock:
            if self._platform is None:
                self._platform = self._detect()
            return self._platform

    def _detect(self) -> str:
        try:
            raw = self.reader(self.property_name, "")
        except (OSError, ValueError) as exc:
            self.logger.warning(
                "Failed to read platform property",
                extra={"property": self.property_name, "error": str(exc)},
            )
            raw = ""

        platform = (raw or "").strip() or UNKNOWN_PLATFORM
        self.logger.info(
            "Resolved platform",
            extra={"property": self.property_name, "platform": platform},
        )
        return platform
