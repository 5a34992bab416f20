"""System property access for platform identification.

Resolution order for :func:`read_property`: the settings override (only for
the configured platform property), the ``getprop`` binary, a ``key=value``
property file, then the caller's default. Every step tolerates failure and
falls through to the next.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Final

from power_hal.settings import PowerHalSettings, get_settings

__all__ = ["GETPROP_TIMEOUT", "read_property", "read_property_file"]

LOGGER = logging.getLogger(__name__)

GETPROP_TIMEOUT: Final[float] = 1.0


def read_property(
    name: str,
    default: str = "",
    *,
    settings: PowerHalSettings | None = None,
) -> str:
    """Return the value of system property ``name`` or ``default``.

    Args:
        name: Property name, for example ``ro.boot.hardware``.
        default: Value returned when no source yields a non-empty value.
        settings: Optional settings override.

    Returns:
        The stripped property value, or ``default``.
    """

    effective = settings or get_settings()

    if name == effective.platform_property and effective.platform_override:
        return effective.platform_override

    value = _read_getprop(name)
    if value:
        return value

    if effective.property_file:
        value = read_property_file(Path(effective.property_file), name)
        if value:
            return value

    return default


def read_property_file(path: Path, name: str) -> str:
    """Return ``name`` from a ``key=value`` property file, or ``""``."""

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return ""
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning(
            "Failed to read property file",
            extra={"path": str(path), "error": str(exc)},
        )
        return ""

    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key.strip() == name:
            return value.strip()
    return ""


def _read_getprop(name: str) -> str:
    executable = shutil.which("getprop")
    if executable is None:
        return ""

    try:
        completed = subprocess.run(
            [executable, name],
            capture_output=True,
            text=True,
            timeout=GETPROP_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError, UnicodeDecodeError) as exc:
        LOGGER.warning(
            "getprop invocation failed",
            extra={"property": name, "error": str(exc)},
        )
        return ""

    if completed.returncode != 0:
        return ""
    return completed.stdout.strip()
