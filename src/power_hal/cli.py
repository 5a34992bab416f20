"""Command-line client for a running power HAL daemon."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from power_hal.host.client import PowerClient, PowerServiceUnavailableError


def _switch(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("on", "true", "1", "enable"):
        return True
    if lowered in ("off", "false", "0", "disable"):
        return False
    raise argparse.ArgumentTypeError(f"Expected on/off, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query or command the power HAL.")
    parser.add_argument(
        "--socket-path",
        type=Path,
        default=None,
        help="Daemon socket (default: POWER_HAL_SOCKET or /run/power-hal.sock).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    query_mode = sub.add_parser("query-mode", help="Is a mode supported?")
    query_mode.add_argument("mode")

    query_boost = sub.add_parser("query-boost", help="Is a boost supported?")
    query_boost.add_argument("boost")

    set_mode = sub.add_parser("set-mode", help="Enable or disable a mode.")
    set_mode.add_argument("mode")
    set_mode.add_argument("state", type=_switch)

    set_boost = sub.add_parser("set-boost", help="Send a boost hint.")
    set_boost.add_argument("boost")
    set_boost.add_argument("--duration-ms", type=int, default=0)
    return parser


def _target(value: str) -> int | str:
    return int(value) if value.lstrip("-").isdigit() else value


def main(argv: list[str] | None = None) -> int:
    """Run one client command and print a JSON result."""

    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    client = PowerClient(args.socket_path)
    try:
        if args.command == "query-mode":
            body: dict[str, object] = {
                "supported": client.is_mode_supported(_target(args.mode))
            }
        elif args.command == "query-boost":
            body = {"supported": client.is_boost_supported(_target(args.boost))}
        elif args.command == "set-mode":
            client.set_mode(_target(args.mode), args.state)
            body = {"status": "ok"}
        else:
            client.set_boost(_target(args.boost), args.duration_ms)
            body = {"status": "ok"}
    except PowerServiceUnavailableError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    print(json.dumps(body, separators=(",", ":")))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
