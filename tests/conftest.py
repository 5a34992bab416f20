"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import inspect
import os
import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure src/ is on sys.path so tests run against the src layout
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from power_hal.control import ControlChannel, ControlSurface  # noqa: E402
from power_hal.settings import PowerHalSettings  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "asyncio: mark test as requiring an event loop")


def pytest_pyfunc_call(pyfuncitem: Any) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames  # type: ignore[attr-defined]
        }

        event_loop = asyncio.new_event_loop()
        try:
            event_loop.run_until_complete(pyfuncitem.obj(**call_kwargs))
        finally:
            event_loop.close()
        return True
    return None


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host POWER_HAL_* variables from leaking into tests."""

    for key in list(os.environ):
        if key.startswith("POWER_HAL_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def governor_files(tmp_path: Path) -> tuple[Path, Path]:
    """Create two sysfs-style ``scaling_governor`` files."""

    paths = []
    for policy in ("policy0", "policy4"):
        policy_dir = tmp_path / "cpufreq" / policy
        policy_dir.mkdir(parents=True)
        governor = policy_dir / "scaling_governor"
        governor.write_text("schedutil", encoding="utf-8")
        paths.append(governor)
    return paths[0], paths[1]


@pytest.fixture
def governor_surface(governor_files: tuple[Path, Path]) -> ControlSurface:
    cluster0, cluster1 = governor_files
    return ControlSurface(
        [ControlChannel("cluster0", cluster0), ControlChannel("cluster1", cluster1)]
    )


@pytest.fixture
def rk3399_settings(governor_files: tuple[Path, Path]) -> PowerHalSettings:
    cluster0, cluster1 = governor_files
    return PowerHalSettings(
        platform_override="rk3399",
        cluster0_governor_path=str(cluster0),
        cluster1_governor_path=str(cluster1),
    )
