"""Tests for the command-line client."""

from __future__ import annotations

from pathlib import Path

import pytest

import power_hal.cli as cli
from power_hal.host.protocol import PowerRequest, PowerResponse


class _RecordingClient:
    requests: list[PowerRequest] = []

    def __init__(self, socket_path: Path | None = None) -> None:
        self.socket_path = socket_path

    def is_mode_supported(self, mode: object) -> bool:
        self.requests.append(PowerRequest(op="is_mode_supported", mode=mode))
        return True

    def is_boost_supported(self, boost: object) -> bool:
        self.requests.append(PowerRequest(op="is_boost_supported", boost=boost))
        return False

    def set_mode(self, mode: object, enabled: bool) -> None:
        self.requests.append(PowerRequest(op="set_mode", mode=mode, enabled=enabled))

    def set_boost(self, boost: object, duration_ms: int) -> None:
        self.requests.append(
            PowerRequest(op="set_boost", boost=boost, duration_ms=duration_ms)
        )


@pytest.fixture
def recording(monkeypatch: pytest.MonkeyPatch) -> type[_RecordingClient]:
    _RecordingClient.requests = []
    monkeypatch.setattr(cli, "PowerClient", _RecordingClient)
    return _RecordingClient


def test_query_mode_prints_json(
    recording: type[_RecordingClient], capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["query-mode", "LOW_POWER"]) == 0
    assert capsys.readouterr().out.strip() == '{"supported":true}'
    assert recording.requests[0].mode == "LOW_POWER"


def test_set_mode_parses_switch_and_wire_values(
    recording: type[_RecordingClient], capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["set-mode", "3", "on"]) == 0
    assert cli.main(["set-boost", "INTERACTION", "--duration-ms", "80"]) == 0
    assert recording.requests[0] == PowerRequest(op="set_mode", mode=3, enabled=True)
    assert recording.requests[1].duration_ms == 80
    assert capsys.readouterr().out.count('{"status":"ok"}') == 2


def test_invalid_switch_is_rejected(recording: type[_RecordingClient]) -> None:
    assert cli.main(["set-mode", "LOW_POWER", "maybe"]) == 1
    assert recording.requests == []


def test_help_exits_cleanly(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--help"]) == 0
    assert "usage:" in capsys.readouterr().out.lower()


def test_unreachable_daemon(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    result = cli.main(["--socket-path", str(tmp_path / "none.sock"), "query-boost", "0"])
    assert result == 1
    assert "Failed to reach power HAL" in capsys.readouterr().err
