#!/usr/bin/env python3
"""
Power Modes Example

This example demonstrates:
- Building a power service against scratch governor files
- Querying mode and boost support for the reference platform
- Toggling LOW_POWER and watching the governors change
"""

import tempfile
from pathlib import Path

from power_hal.service import create_power_service
from power_hal.settings import PowerHalSettings
from power_hal.types import Boost, Mode


def make_governors(root):
    """Create fake per-cluster scaling_governor files under root."""
    paths = []
    for policy in ("policy0", "policy4"):
        policy_dir = root / policy
        policy_dir.mkdir()
        path = policy_dir / "scaling_governor"
        path.write_text("schedutil")
        paths.append(path)
    return paths


def show(paths):
    print("  governors:", [p.read_text() for p in paths])


def main():
    with tempfile.TemporaryDirectory() as tmp:
        cluster0, cluster1 = make_governors(Path(tmp))
        service = create_power_service(
            PowerHalSettings(
                platform_override="rk3399",
                cluster0_governor_path=str(cluster0),
                cluster1_governor_path=str(cluster1),
            )
        )

        print("Supported modes:")
        for mode in Mode:
            print(f"  {mode.name:<28} {service.is_mode_supported(mode)}")
        print("Supported boosts:")
        for boost in Boost:
            print(f"  {boost.name:<28} {service.is_boost_supported(boost)}")

        print("LOW_POWER on")
        service.set_mode(Mode.LOW_POWER, True)
        show([cluster0, cluster1])

        print("LOW_POWER off")
        service.set_mode(Mode.LOW_POWER, False)
        show([cluster0, cluster1])


if __name__ == "__main__":
    main()
