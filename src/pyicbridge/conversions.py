"""Numeric conversions between accessory values and protocol values.

Rounding here is protocol-significant: the controller only accepts RPM
settings in steps of 50 and whole flow rates, and every rounding is half-up
(2225 RPM becomes 2250, not 2200).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from .attributes import RPM_STEP
from .model import Color, PumpSpeedType

if TYPE_CHECKING:
    from .model import Pump


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return math.floor(value + 0.5)


def celsius_to_fahrenheit(value: float) -> float:
    """Convert a Celsius temperature to Fahrenheit."""
    return value * 1.8 + 32


def fahrenheit_to_celsius(value: float) -> float:
    """Convert a Fahrenheit temperature to Celsius."""
    return (value - 32) / 1.8


def speed_bounds(pump: Pump, speed_type: PumpSpeedType | None) -> tuple[float, float]:
    """Return the (min, max) bounds of a pump for the given speed unit."""
    if speed_type == PumpSpeedType.GPM:
        return pump.min_flow, pump.max_flow
    return pump.min_rpm, pump.max_rpm


def power_level_to_speed(
    power_level: float, minimum: float, maximum: float, speed_type: PumpSpeedType | None
) -> int:
    """Convert a 0-100 power level to a physical speed.

    Flow rates round to the nearest unit, RPM to the nearest multiple of 50.
    """
    value = minimum + power_level / 100 * (maximum - minimum)
    if speed_type == PumpSpeedType.GPM:
        return round_half_up(value)
    return round_half_up(value / RPM_STEP) * RPM_STEP


def speed_to_power_level(speed: float | None, minimum: float, maximum: float) -> int:
    """Convert a physical speed to a 0-100 power level."""
    if not speed:
        return 0
    speed_range = maximum - minimum
    if speed_range <= 0:
        return 0
    return round_half_up((speed - minimum) / speed_range * 100)


def intellibrite_color(hue: float, saturation: float) -> Color:
    """Snap a hue/saturation pair to the closest IntelliBrite color.

    Every color but white is fully saturated, so anything below half
    saturation is white. Otherwise the hue picks the color whose hue is
    closest going around the wheel.
    """
    if saturation <= (Color.RED.saturation - Color.WHITE.saturation) / 2:
        return Color.WHITE
    if hue < (Color.GREEN.hue - Color.RED.hue) / 2 + Color.RED.hue:
        return Color.RED
    if hue < (Color.BLUE.hue - Color.GREEN.hue) / 2 + Color.GREEN.hue:
        return Color.GREEN
    if hue < (Color.MAGENTA.hue - Color.BLUE.hue) / 2 + Color.BLUE.hue:
        return Color.BLUE
    return Color.MAGENTA
