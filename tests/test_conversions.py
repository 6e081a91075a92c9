"""Tests for numeric conversions."""

import pytest

from pyicbridge import Color, Pump, PumpSpeedType
from pyicbridge.conversions import (
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
    intellibrite_color,
    power_level_to_speed,
    round_half_up,
    speed_bounds,
    speed_to_power_level,
)


class TestRounding:
    """Tests for round_half_up()."""

    @pytest.mark.parametrize(
        ("value", "expected"), [(2.5, 3), (3.5, 4), (2.4999, 2), (44.5, 45), (0.0, 0)]
    )
    def test_halves_go_up(self, value, expected):
        """Unlike round(), halves never go to the even neighbour."""
        assert round_half_up(value) == expected


class TestTemperature:
    """Tests for temperature conversions."""

    def test_known_points(self):
        """Freezing and boiling points convert exactly."""
        assert celsius_to_fahrenheit(0) == 32
        assert celsius_to_fahrenheit(100) == 212
        assert fahrenheit_to_celsius(212) == pytest.approx(100)

    @pytest.mark.parametrize("celsius", range(-100, 101, 25))
    def test_round_trip(self, celsius):
        """Converting there and back returns the original value."""
        assert fahrenheit_to_celsius(celsius_to_fahrenheit(celsius)) == pytest.approx(celsius)


class TestPumpSpeed:
    """Tests for power level and speed conversions."""

    def test_flow_rounds_to_unit(self):
        """Half power on a 0-100 GPM pump is 50 GPM, and back."""
        assert power_level_to_speed(50, 0, 100, PumpSpeedType.GPM) == 50
        assert speed_to_power_level(50, 0, 100) == 50

    def test_rpm_rounds_to_step(self):
        """RPM settings are multiples of 50, rounded half-up."""
        speed = power_level_to_speed(50, 1000, 3450, PumpSpeedType.RPM)
        assert speed == 2250
        assert speed_to_power_level(speed, 1000, 3450) == 51

    def test_unknown_unit_uses_rpm(self):
        """Without a unit the speed is treated as RPM."""
        assert power_level_to_speed(0, 450, 3450, None) == 450
        assert power_level_to_speed(100, 450, 3450, None) == 3450

    def test_zero_speed_is_zero_power(self):
        """A stopped circuit is at power level 0."""
        assert speed_to_power_level(0, 450, 3450) == 0
        assert speed_to_power_level(None, 450, 3450) == 0

    def test_empty_range(self):
        """A pump whose bounds are equal has no meaningful power level."""
        assert speed_to_power_level(1000, 1000, 1000) == 0

    def test_speed_bounds(self):
        """Bounds follow the speed unit."""
        pump = Pump(objnam="PMP01", min_rpm=450, max_rpm=3450, min_flow=20, max_flow=140)
        assert speed_bounds(pump, PumpSpeedType.GPM) == (20, 140)
        assert speed_bounds(pump, PumpSpeedType.RPM) == (450, 3450)
        assert speed_bounds(pump, None) == (450, 3450)


class TestIntellibriteColor:
    """Tests for snapping hue/saturation to a fixed color."""

    @pytest.mark.parametrize(
        ("hue", "saturation", "expected"),
        [
            (120, 50, Color.WHITE),
            (300, 0, Color.WHITE),
            (0, 100, Color.RED),
            (59.9, 100, Color.RED),
            (60, 100, Color.GREEN),
            (179, 80, Color.GREEN),
            (180, 100, Color.BLUE),
            (269, 100, Color.BLUE),
            (270, 100, Color.MAGENTA),
            (359, 51, Color.MAGENTA),
        ],
    )
    def test_cutoffs(self, hue, saturation, expected):
        """Each color covers the hues halfway to its neighbours."""
        assert intellibrite_color(hue, saturation) is expected
