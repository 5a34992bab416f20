"""Async Unix socket server exposing a :class:`PowerService`."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Final

from power_hal.host.ipc import (
    SocketSetup,
    bind_unix_socket_safe,
    cleanup_unix_socket,
    secure_unix_socket,
)
from power_hal.host.protocol import PowerResponse, handle_payload
from power_hal.service import PowerService

__all__ = ["MAX_REQUEST_BYTES", "start_ipc_server"]

LOGGER = logging.getLogger(__name__)

MAX_REQUEST_BYTES: Final[int] = 4096


async def start_ipc_server(
    service: PowerService,
    *,
    socket_path: Path,
    group_name: str | None = None,
    mode: int = 0o660,
) -> tuple[asyncio.AbstractServer, SocketSetup]:
    """Serve ``service`` on ``socket_path``.

    Each connection carries one request line and receives one response line.
    Service calls run in a worker thread so sysfs writes never block the loop.

    Returns:
        The running server and the socket bookkeeping needed for cleanup.

    Raises:
        SocketAlreadyInUseError: If another listener owns ``socket_path``.
        SocketPermissionError: If permissions cannot be applied.
    """

    original_umask = os.umask(0o077)
    try:
        setup = bind_unix_socket_safe(socket_path)
    finally:
        os.umask(original_umask)

    async def _handle(
        reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        try:
            response = await _respond(service, reader)
            writer.write(response.to_line())
            await writer.drain()
        except ConnectionError as exc:
            LOGGER.debug("Client disconnected", extra={"error": str(exc)})
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass

    server = await asyncio.start_unix_server(
        _handle, sock=setup.socket, limit=MAX_REQUEST_BYTES
    )

    try:
        secure_unix_socket(setup, mode=mode, group_name=group_name)
    except Exception:
        server.close()
        await server.wait_closed()
        cleanup_unix_socket(setup)
        raise

    LOGGER.info("Power HAL endpoint listening", extra={"path": str(socket_path)})
    return server, setup


async def _respond(
    service: PowerService, reader: asyncio.StreamReader
) -> PowerResponse:
    try:
        line = await reader.readuntil(b"\n")
    except asyncio.LimitOverrunError:
        return PowerResponse(status="error", error="request too large")
    except asyncio.IncompleteReadError as exc:
        line = exc.partial
        if not line.strip():
            return PowerResponse(status="error", error="empty request")

    return await asyncio.to_thread(handle_payload, service, line.strip())
