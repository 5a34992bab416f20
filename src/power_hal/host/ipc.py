"""Unix domain socket helpers for the power HAL endpoint."""

from __future__ import annotations

import grp
import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Final

__all__ = [
    "SocketAlreadyInUseError",
    "SocketPermissionError",
    "SocketSetup",
    "bind_unix_socket_safe",
    "cleanup_unix_socket",
    "secure_unix_socket",
]

DEFAULT_PROBE_TIMEOUT: Final[float] = 0.1


class SocketAlreadyInUseError(RuntimeError):
    """Raised when another live process already serves the socket path."""


class SocketPermissionError(RuntimeError):
    """Raised when ownership or mode cannot be applied to the socket."""


@dataclass(slots=True)
class SocketSetup:
    """A bound, listening socket and the path it occupies."""

    socket: socket.socket
    path: Path


def bind_unix_socket_safe(
    path: Path,
    *,
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
    backlog: int = 8,
) -> SocketSetup:
    """Bind and listen on ``path``, replacing a stale socket file.

    Raises:
        SocketAlreadyInUseError: If a listener answers on ``path``.
        OSError: If binding fails.
    """

    if path.exists() or path.is_symlink():
        if _is_live(path, probe_timeout):
            raise SocketAlreadyInUseError(f"Socket already in use: {path}")
        path.unlink()

    path.parent.mkdir(parents=True, exist_ok=True)

    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(path))
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    sock.setblocking(False)
    return SocketSetup(socket=sock, path=path)


def secure_unix_socket(
    setup: SocketSetup,
    *,
    mode: int = 0o660,
    group_name: str | None = None,
) -> None:
    """Apply ``mode`` and, optionally, group ownership to the socket file.

    Raises:
        SocketPermissionError: If the group is unknown or the change is
            refused by the operating system.
    """

    try:
        os.chmod(setup.path, mode)
    except OSError as exc:
        raise SocketPermissionError(f"Failed to chmod {setup.path}: {exc}") from exc

    if not group_name:
        return

    try:
        gid = grp.getgrnam(group_name).gr_gid
    except KeyError as exc:
        raise SocketPermissionError(f"Group not found: {group_name}") from exc

    try:
        os.chown(setup.path, -1, gid)
    except OSError as exc:
        raise SocketPermissionError(f"Failed to chown {setup.path}: {exc}") from exc


def cleanup_unix_socket(setup: SocketSetup) -> None:
    """Close the socket and remove its path; missing files are ignored."""

    setup.socket.close()
    try:
        setup.path.unlink()
    except FileNotFoundError:
        return


def _is_live(path: Path, probe_timeout: float) -> bool:
    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as probe:
            probe.settimeout(probe_timeout)
            probe.connect(str(path))
    except (FileNotFoundError, ConnectionRefusedError, TimeoutError):
        return False
    except OSError:
        # Permission errors mean someone else owns it; do not delete.
        return True
    return True
