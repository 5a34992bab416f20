"""Environment-backed settings primitives for :mod:`power_hal`."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "DEFAULT_CLUSTER0_GOVERNOR_PATH",
    "DEFAULT_CLUSTER1_GOVERNOR_PATH",
    "DEFAULT_SOCKET_PATH",
    "PowerHalSettings",
    "get_settings",
]

DEFAULT_CLUSTER0_GOVERNOR_PATH = (
    "/sys/devices/system/cpu/cpufreq/policy0/scaling_governor"
)
DEFAULT_CLUSTER1_GOVERNOR_PATH = (
    "/sys/devices/system/cpu/cpufreq/policy4/scaling_governor"
)
DEFAULT_SOCKET_PATH = "/run/power-hal.sock"


class PowerHalSettings(BaseSettings):
    """Expose environment-derived configuration knobs for the power HAL.

    All environment lookups go through this class so tests and the daemon
    share one source of truth.

    Attributes:
        platform_override: Platform identifier used instead of the system
            property. Intended for bring-up and tests.
        platform_property: Name of the property carrying the hardware tag.
        property_file: Optional ``key=value`` property file consulted when
            ``getprop`` is unavailable.
        cluster0_governor_path: ``scaling_governor`` file of the first CPU
            performance cluster.
        cluster1_governor_path: ``scaling_governor`` file of the second CPU
            performance cluster.
        socket_path: Unix domain socket served by the daemon.
        request_timeout: Client timeout in seconds for endpoint requests.
    """

    platform_override: str | None = Field(default=None, alias="POWER_HAL_PLATFORM")
    platform_property: str = Field(
        default="ro.boot.hardware", alias="POWER_HAL_PLATFORM_PROPERTY"
    )
    property_file: str | None = Field(default=None, alias="POWER_HAL_PROPERTY_FILE")
    cluster0_governor_path: str = Field(
        default=DEFAULT_CLUSTER0_GOVERNOR_PATH, alias="POWER_HAL_CLUSTER0_GOVERNOR"
    )
    cluster1_governor_path: str = Field(
        default=DEFAULT_CLUSTER1_GOVERNOR_PATH, alias="POWER_HAL_CLUSTER1_GOVERNOR"
    )
    socket_path: str = Field(default=DEFAULT_SOCKET_PATH, alias="POWER_HAL_SOCKET")
    request_timeout: float = Field(default=0.5, alias="POWER_HAL_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=None, extra="ignore", populate_by_name=True
    )

    @field_validator("request_timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: object) -> float:
        """Parse the timeout while tolerating malformed input.

        Args:
            value: Raw environment value.

        Returns:
            Parsed positive float, or the default when conversion fails.
        """

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            parsed = float(value)
        elif isinstance(value, str):
            try:
                parsed = float(value.strip())
            except ValueError:
                return 0.5
        else:
            return 0.5
        return parsed if parsed > 0 else 0.5

    @field_validator("platform_override", "property_file", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: object) -> str | None:
        """Treat empty strings as unset."""

        if value is None:
            return None
        text = str(value).strip()
        return text or None


def get_settings() -> PowerHalSettings:
    """Return a :class:`PowerHalSettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return PowerHalSettings()
