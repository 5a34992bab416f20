"""Command-line entrypoint for the power HAL daemon."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
from collections.abc import Sequence
from pathlib import Path

from power_hal.host.ipc import SocketSetup, cleanup_unix_socket
from power_hal.host.server import start_ipc_server
from power_hal.logging_pipeline import (
    configure_structured_logging,
    parse_level,
    shutdown_listeners,
)
from power_hal.service import PowerService, get_power_service
from power_hal.settings import get_settings

LOGGER = logging.getLogger("power_hal")


def _parse_octal(value: str) -> int:
    try:
        return int(value, 8)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid octal value: {value}") from exc


def _parse_level(value: str) -> int:
    try:
        return parse_level(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the daemon CLI."""

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Platform power HAL daemon")
    parser.add_argument(
        "--socket-path",
        type=Path,
        default=Path(settings.socket_path),
        help=f"Unix domain socket to serve (default: {settings.socket_path}).",
    )
    parser.add_argument(
        "--socket-group",
        default=None,
        help="POSIX group granted access to the socket.",
    )
    parser.add_argument(
        "--socket-mode",
        type=_parse_octal,
        default=0o660,
        help="File mode (octal) applied to the socket (default: 660).",
    )
    parser.add_argument(
        "--log-level",
        type=_parse_level,
        default=logging.INFO,
        help="Logging level name (default: INFO).",
    )
    return parser


async def run_daemon(
    *,
    socket_path: Path,
    group_name: str | None = None,
    socket_mode: int = 0o660,
    service: PowerService | None = None,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Serve the power HAL until ``stop_event`` is set or the task is cancelled.

    Platform detection runs before the socket opens so the first request
    never pays for it.
    """

    effective = service or get_power_service()
    masks = await asyncio.to_thread(effective.capabilities)
    LOGGER.info(
        "Capabilities resolved",
        extra={
            "platform": effective.detector.resolve_platform(),
            "mode_mask": masks.mode_mask,
            "boost_mask": masks.boost_mask,
        },
    )

    server: asyncio.AbstractServer
    setup: SocketSetup
    server, setup = await start_ipc_server(
        effective, socket_path=socket_path, group_name=group_name, mode=socket_mode
    )
    waiter = stop_event or asyncio.Event()
    try:
        await waiter.wait()
    finally:
        server.close()
        await server.wait_closed()
        cleanup_unix_socket(setup)
        LOGGER.info("Power HAL endpoint stopped", extra={"path": str(socket_path)})


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for ``python -m power_hal.host.daemon``.

    Returns:
        Exit status code (``0`` for a clean shutdown).
    """

    args = build_parser().parse_args(list(argv) if argv is not None else None)
    listener = configure_structured_logging(LOGGER, level=args.log_level)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    stop_event = asyncio.Event()

    def _handle_signal(signum: int) -> None:  # pragma: no cover - signal path
        LOGGER.info("Received signal", extra={"signal": signum})
        stop_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, _handle_signal, sig)

    try:
        loop.run_until_complete(
            run_daemon(
                socket_path=args.socket_path,
                group_name=args.socket_group,
                socket_mode=args.socket_mode,
                stop_event=stop_event,
            )
        )
    except KeyboardInterrupt:  # pragma: no cover - handled by signal handler
        pass
    except Exception as exc:
        LOGGER.error("Power HAL terminated with error", exc_info=exc)
        return 1
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        shutdown_listeners([listener])

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
