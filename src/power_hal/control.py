"""Best-effort writes to named control channels.

A missing channel is normal on heterogeneous hardware and is reported as
:attr:`WriteOutcome.ABSENT` without logging an error. Open or write failures
are logged with the channel and OS error text and reported as
:attr:`WriteOutcome.FAILED`. Nothing here raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from power_hal.settings import PowerHalSettings, get_settings

__all__ = [
    "ControlChannel",
    "ControlSurface",
    "WriteOutcome",
    "create_governor_surface",
    "write_channel",
]

LOGGER = logging.getLogger(__name__)


class WriteOutcome(Enum):
    """Result of a single channel write."""

    WRITTEN = "written"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class ControlChannel:
    """A named control path accepting string writes."""

    name: str
    path: Path


def write_channel(
    channel: ControlChannel, value: str, *, logger: logging.Logger = LOGGER
) -> WriteOutcome:
    """Write ``value`` to ``channel``.

    Args:
        channel: Target control channel.
        value: String written verbatim, without a trailing newline.
        logger: Logger receiving failure diagnostics.

    Returns:
        The outcome of the write. Callers decide whether to log or discard it.
    """

    if not channel.path.exists():
        logger.debug(
            "Control channel absent",
            extra={"channel": channel.name, "path": str(channel.path)},
        )
        return WriteOutcome.ABSENT

    try:
        handle = channel.path.open("w", encoding="utf-8")
    except OSError as exc:
        logger.error(
            "Error opening %s: %s",
            channel.path,
            exc.strerror or exc,
            extra={"channel": channel.name, "value": value},
        )
        return WriteOutcome.FAILED

    # Buffered text is flushed on close, so close failures count as writes.
    try:
        with handle:
            handle.write(value)
    except OSError as exc:
        logger.error(
            "Error writing to %s: %s",
            channel.path,
            exc.strerror or exc,
            extra={"channel": channel.name, "value": value},
        )
        return WriteOutcome.FAILED

    return WriteOutcome.WRITTEN


class ControlSurface:
    """A group of channels sharing the same write contract."""

    def __init__(
        self,
        channels: Iterable[ControlChannel],
        logger: logging.Logger = LOGGER,
    ) -> None:
        self.channels = tuple(channels)
        self.logger = logger

    def write(self, value: str) -> dict[str, WriteOutcome]:
        """Write ``value`` to every channel, in order.

        Returns:
            Mapping of channel names to their individual outcomes.
        """

        return {
            channel.name: write_channel(channel, value, logger=self.logger)
            for channel in self.channels
        }


def create_governor_surface(
    settings: PowerHalSettings | None = None,
) -> ControlSurface:
    """Build the per-cluster ``scaling_governor`` surface from settings."""

    effective = settings or get_settings()
    return ControlSurface(
        [
            ControlChannel("cluster0", Path(effective.cluster0_governor_path)),
            ControlChannel("cluster1", Path(effective.cluster1_governor_path)),
        ]
    )
