"""Tests for BridgeConfig."""

import dataclasses

import pytest

from pyicbridge import BridgeConfig, ICConfigError, TemperatureUnits

ENV_KEYS = (
    "INTELLICENTER_HOST",
    "INTELLICENTER_PORT",
    "INTELLICENTER_USERNAME",
    "INTELLICENTER_PASSWORD",
    "INTELLICENTER_TEMPERATURE_UNITS",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove INTELLICENTER_* variables, including any a .env file sets."""
    for key in ENV_KEYS:
        # setting first makes monkeypatch delete the variable again on undo
        monkeypatch.setenv(key, "unset")
        monkeypatch.delenv(key)
    return monkeypatch


class TestDefaults:
    """Tests for the default configuration."""

    def test_defaults(self):
        """Nothing configured means mDNS location on the standard port."""
        config = BridgeConfig()
        assert config.host is None
        assert config.port == 6681
        assert config.temperature_units == TemperatureUnits.F
        assert config.uses_fahrenheit
        assert config.max_buffer_size == 1024 * 1024

    def test_frozen(self):
        """Configurations cannot be changed once built."""
        config = BridgeConfig(host="10.0.0.5")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.host = "10.0.0.6"

    def test_repr_hides_password(self):
        """The password never shows up in logs."""
        config = BridgeConfig(host="10.0.0.5", username="admin", password="hunter2")
        assert "hunter2" not in repr(config)
        assert "admin" in repr(config)


class TestValidation:
    """Tests for rejecting bad settings."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"port": 0},
            {"port": 70000},
            {"max_buffer_size": 0},
            {"minimum_temperature": 50, "maximum_temperature": 50},
            {"reconnect_delay": 0},
            {"connect_timeout": -1},
            {"keepalive_interval": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Out of range values raise ICConfigError."""
        with pytest.raises(ICConfigError):
            BridgeConfig(**kwargs)


class TestFromMapping:
    """Tests for BridgeConfig.from_mapping()."""

    def test_camel_case_keys(self):
        """Host application keys are mapped onto fields."""
        config = BridgeConfig.from_mapping(
            {
                "platform": "IntelliCenter",
                "ipAddress": "192.168.1.10",
                "temperatureUnits": "c",
                "minimumTemperature": "10",
                "maximumTemperature": "40",
                "maxBufferSize": "2048",
            }
        )
        assert config.host == "192.168.1.10"
        assert config.temperature_units == TemperatureUnits.C
        assert not config.uses_fahrenheit
        assert config.minimum_temperature == 10.0
        assert config.maximum_temperature == 40.0
        assert config.max_buffer_size == 2048

    def test_snake_case_keys(self):
        """Field names work as keys too, and text is converted."""
        config = BridgeConfig.from_mapping({"host": "pool.local", "port": "6682"})
        assert config.host == "pool.local"
        assert config.port == 6682

    def test_empty_values_are_unset(self):
        """Empty strings and None fall back to the defaults."""
        config = BridgeConfig.from_mapping({"ipAddress": "", "port": None})
        assert config.host is None
        assert config.port == 6681

    @pytest.mark.parametrize(
        "data",
        [
            {"port": "abc"},
            {"port": "0"},
            {"temperatureUnits": "K"},
            {"maxBufferSize": [1]},
        ],
    )
    def test_invalid(self, data):
        """Values that do not convert or are out of range raise ICConfigError."""
        with pytest.raises(ICConfigError):
            BridgeConfig.from_mapping(data)


class TestFromEnv:
    """Tests for BridgeConfig.from_env()."""

    def test_env_file(self, clean_env, tmp_path):
        """Values are read from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            "INTELLICENTER_HOST=10.0.0.5\n"
            "INTELLICENTER_PORT=6682\n"
            "INTELLICENTER_TEMPERATURE_UNITS=c\n"
        )
        config = BridgeConfig.from_env(env_file)

        assert config.host == "10.0.0.5"
        assert config.port == 6682
        assert config.temperature_units == TemperatureUnits.C

    def test_environment_wins_over_file(self, clean_env, tmp_path):
        """Variables already in the environment are not overridden."""
        env_file = tmp_path / ".env"
        env_file.write_text("INTELLICENTER_HOST=10.0.0.5\n")
        clean_env.setenv("INTELLICENTER_HOST", "10.0.0.9")
        clean_env.setenv("INTELLICENTER_PASSWORD", "secret")

        config = BridgeConfig.from_env(env_file)

        assert config.host == "10.0.0.9"
        assert config.password == "secret"

    def test_missing_file(self, clean_env, tmp_path):
        """A missing file leaves the defaults."""
        config = BridgeConfig.from_env(tmp_path / "missing.env")
        assert config.host is None
