"""Unit conversion for display values. Canonical units are Celsius and km/h."""
import math
from typing import Union

Number = Union[int, float]

KMH_TO_MPH = 0.621371


def round_half_away(value: float) -> Number:
    """Round to the nearest integer, halves away from zero. NaN/Inf pass through."""
    if not math.isfinite(value):
        return value
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def convert_temperature(celsius: float, unit: str) -> Number:
    """Celsius to the display unit ("celsius" or "fahrenheit")."""
    if unit == "fahrenheit":
        return round_half_away(celsius * 9 / 5 + 32)
    return round_half_away(celsius)


def convert_wind_speed(kmh: float, unit: str) -> Number:
    """km/h to the display unit ("kmh" or "mph")."""
    if unit == "mph":
        return round_half_away(kmh * KMH_TO_MPH)
    return round_half_away(kmh)


def temperature_symbol(unit: str) -> str:
    return "°F" if unit == "fahrenheit" else "°C"


def wind_speed_symbol(unit: str) -> str:
    return "mph" if unit == "mph" else "km/h"
