"""End-to-end tests for the socket endpoint, client and daemon."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from power_hal.host.client import PowerClient, PowerServiceUnavailableError
from power_hal.host.daemon import build_parser, run_daemon
from power_hal.host.server import start_ipc_server
from power_hal.service import PowerService, create_power_service
from power_hal.settings import PowerHalSettings
from power_hal.types import Boost, Mode


@pytest.fixture
def service(rk3399_settings: PowerHalSettings) -> PowerService:
    return create_power_service(rk3399_settings)


@pytest.mark.asyncio
async def test_client_round_trip(
    service: PowerService, tmp_path: Path, governor_files: tuple[Path, Path]
) -> None:
    socket_path = tmp_path / "hal.sock"
    server, setup = await start_ipc_server(service, socket_path=socket_path)
    client = PowerClient(socket_path, timeout=2.0)
    try:
        assert await asyncio.to_thread(client.is_mode_supported, Mode.LAUNCH)
        assert not await asyncio.to_thread(
            client.is_mode_supported, Mode.DOUBLE_TAP_TO_WAKE
        )
        assert await asyncio.to_thread(client.is_boost_supported, Boost.ML_ACC)
        await asyncio.to_thread(client.set_mode, Mode.FIXED_PERFORMANCE, True)
        await asyncio.to_thread(client.set_boost, Boost.INTERACTION, 50)
    finally:
        server.close()
        await server.wait_closed()
        setup.socket.close()
        socket_path.unlink(missing_ok=True)

    assert [p.read_text(encoding="utf-8") for p in governor_files] == [
        "performance",
        "performance",
    ]


@pytest.mark.asyncio
async def test_malformed_request_gets_error_line(
    service: PowerService, tmp_path: Path
) -> None:
    socket_path = tmp_path / "hal.sock"
    server, setup = await start_ipc_server(service, socket_path=socket_path)
    try:
        reader, writer = await asyncio.open_unix_connection(str(socket_path))
        writer.write(b'{"op":"explode"}\n')
        await writer.drain()
        line = await reader.readline()
        writer.close()
        await writer.wait_closed()
    finally:
        server.close()
        await server.wait_closed()
        setup.socket.close()
        socket_path.unlink(missing_ok=True)

    assert line.startswith(b'{"status":"error"')


def test_client_reports_unreachable_endpoint(tmp_path: Path) -> None:
    client = PowerClient(tmp_path / "absent.sock", timeout=0.2)
    with pytest.raises(PowerServiceUnavailableError):
        client.is_mode_supported(Mode.LOW_POWER)


@pytest.mark.asyncio
async def test_run_daemon_serves_until_stopped(
    service: PowerService, tmp_path: Path
) -> None:
    socket_path = tmp_path / "daemon.sock"
    stop_event = asyncio.Event()
    task = asyncio.create_task(
        run_daemon(socket_path=socket_path, service=service, stop_event=stop_event)
    )

    for _ in range(100):
        if socket_path.exists():
            break
        await asyncio.sleep(0.01)

    client = PowerClient(socket_path, timeout=2.0)
    assert await asyncio.to_thread(client.is_boost_supported, "CAMERA_SHOT")

    stop_event.set()
    await asyncio.wait_for(task, timeout=2.0)
    assert not socket_path.exists()


def test_daemon_parser_accepts_octal_mode_and_level() -> None:
    args = build_parser().parse_args(
        ["--socket-path", "/tmp/x.sock", "--socket-mode", "600", "--log-level", "debug"]
    )
    assert args.socket_path == Path("/tmp/x.sock")
    assert args.socket_mode == 0o600
    assert args.log_level == 10
