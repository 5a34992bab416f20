"""Tests for one-time platform detection."""

from __future__ import annotations

import threading
import time

import pytest

from power_hal.platform import UNKNOWN_PLATFORM, PlatformDetector


class CountingReader:
    """Property reader that records how often it is called."""

    def __init__(self, value: str, delay: float = 0.0) -> None:
        self.value = value
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    def __call__(self, name: str, default: str) -> str:
        self.calls.append((name, default))
        if self.delay:
            time.sleep(self.delay)
        return self.value


def test_resolves_once_and_caches() -> None:
    reader = CountingReader("rk3399")
    detector = PlatformDetector(reader=reader)

    assert not detector.resolved
    assert detector.resolve_platform() == "rk3399"
    reader.value = "rk3326"
    assert detector.resolve_platform() == "rk3399"
    assert reader.calls == [("ro.boot.hardware", "")]
    assert detector.resolved


def test_empty_identifier_resolves_to_unknown() -> None:
    detector = PlatformDetector(reader=CountingReader("  "))
    assert detector.resolve_platform() == UNKNOWN_PLATFORM


def test_unreadable_identifier_resolves_to_unknown(
    caplog: pytest.LogCaptureFixture,
) -> None:
    def failing_reader(name: str, default: str) -> str:
        raise PermissionError("denied")

    detector = PlatformDetector(reader=failing_reader)
    caplog.set_level("WARNING")
    assert detector.resolve_platform() == UNKNOWN_PLATFORM
    assert "Failed to read platform property" in caplog.text


def test_concurrent_first_resolution_reads_once() -> None:
    reader = CountingReader("rk3399", delay=0.02)
    detector = PlatformDetector(reader=reader)
    results: list[str] = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        results.append(detector.resolve_platform())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == ["rk3399"] * 8
    assert len(reader.calls) == 1


def test_undecodable_identifier_resolves_to_unknown_once() -> None:
    calls: list[str] = []

    def garbled_reader(name: str, default: str) -> str:
        calls.append(name)
        raise UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")

    detector = PlatformDetector(reader=garbled_reader)
    assert detector.resolve_platform() == UNKNOWN_PLATFORM
    assert detector.resolve_platform() == UNKNOWN_PLATFORM
    assert calls == ["ro.boot.hardware"]
