"""Bridge configuration.

The host application usually hands over its configuration as a mapping
with camelCase keys; scripts and tests read it from the environment
(optionally from a ``.env`` file).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from .attributes import DEFAULT_PORT
from .exceptions import ICConfigError
from .framing import DEFAULT_MAX_BUFFER_SIZE
from .model import TemperatureUnits
from .protocol import KEEPALIVE_INTERVAL
from .session import DEFAULT_CONNECT_TIMEOUT, DEFAULT_RECONNECT_DELAY

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

_LOGGER = logging.getLogger(__name__)

# host application keys -> BridgeConfig fields
CAMEL_CASE_KEYS = {
    "ipAddress": "host",
    "maxBufferSize": "max_buffer_size",
    "temperatureUnits": "temperature_units",
    "minimumTemperature": "minimum_temperature",
    "maximumTemperature": "maximum_temperature",
    "reconnectDelay": "reconnect_delay",
    "connectTimeout": "connect_timeout",
    "keepaliveInterval": "keepalive_interval",
}

ENV_PREFIX = "INTELLICENTER_"


@dataclass(frozen=True)
class BridgeConfig:
    """Settings of one bridge to one IntelliCenter."""

    host: str | None = None
    port: int = DEFAULT_PORT
    username: str | None = None
    password: str | None = None
    max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE
    temperature_units: TemperatureUnits = TemperatureUnits.F
    minimum_temperature: float = 40
    maximum_temperature: float = 104
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    keepalive_interval: float = KEEPALIVE_INTERVAL

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ICConfigError(f"Invalid port {self.port}")
        if self.max_buffer_size <= 0:
            raise ICConfigError(f"Invalid max buffer size {self.max_buffer_size}")
        if self.minimum_temperature >= self.maximum_temperature:
            raise ICConfigError(
                f"Minimum temperature {self.minimum_temperature} must be below "
                f"maximum temperature {self.maximum_temperature}"
            )
        if min(self.reconnect_delay, self.connect_timeout, self.keepalive_interval) <= 0:
            raise ICConfigError("Delays and timeouts must be positive")

    def __repr__(self) -> str:
        # the password stays out of logs
        return (
            f"BridgeConfig(host={self.host!r}, port={self.port}, "
            f"username={self.username!r}, temperature_units={self.temperature_units})"
        )

    @property
    def uses_fahrenheit(self) -> bool:
        """Return True if the controller is set up in Fahrenheit."""
        return self.temperature_units == TemperatureUnits.F

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> BridgeConfig:
        """Build a configuration from camelCase or snake_case keys.

        Unknown keys are ignored. Empty strings count as unset.

        Raises:
            ICConfigError: If a value has the wrong type or is out of range.
        """
        names = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = CAMEL_CASE_KEYS.get(key, key)
            if name not in names:
                _LOGGER.debug("Ignoring unknown configuration key %s", key)
                continue
            if value is None or value == "":
                continue
            values[name] = value
        return cls(**_coerce(values))

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> BridgeConfig:
        """Build a configuration from INTELLICENTER_* environment variables.

        A ``.env`` file is loaded first when present; variables already set in
        the environment take precedence over it.
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        data = {}
        for name in ("host", "port", "username", "password", "temperature_units"):
            value = os.getenv(ENV_PREFIX + name.upper())
            if value:
                data[name] = value
        return cls.from_mapping(data)


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    """Convert textual values to the field types."""
    converters = {
        "port": int,
        "max_buffer_size": int,
        "minimum_temperature": float,
        "maximum_temperature": float,
        "reconnect_delay": float,
        "connect_timeout": float,
        "keepalive_interval": float,
    }
    result = dict(values)
    try:
        for name, convert in converters.items():
            if name in result:
                result[name] = convert(result[name])
        if "temperature_units" in result:
            result["temperature_units"] = TemperatureUnits(str(result["temperature_units"]).upper())
    except (TypeError, ValueError) as err:
        raise ICConfigError(f"Invalid configuration: {err}") from err
    return result
