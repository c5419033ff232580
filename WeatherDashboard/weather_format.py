"""Display helpers for weather values - pure functions for testability."""
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from daily_aggregator import parse_timestamp
from units import (
    convert_temperature,
    convert_wind_speed,
    round_half_away,
    temperature_symbol,
    wind_speed_symbol,
)
from weather_data import DailySummary, HourlyReading, Preferences, WeatherSnapshot


@dataclass(frozen=True)
class WeatherCode:
    """WMO weather interpretation code."""
    code: int
    description: str
    icon: str
    day_icon: str
    night_icon: str


def _code(
    code: int,
    description: str,
    day_icon: str,
    night_icon: Optional[str] = None,
    icon: Optional[str] = None,
) -> WeatherCode:
    night_icon = night_icon or day_icon
    return WeatherCode(code, description, icon or day_icon, day_icon, night_icon)


WEATHER_CODES = {
    wc.code: wc
    for wc in (
        _code(0, "Clear sky", "sun", "moon"),
        _code(1, "Mainly clear", "cloud-sun", "cloud-moon"),
        _code(2, "Partly cloudy", "cloud-sun", "cloud-moon", icon="cloud"),
        _code(3, "Overcast", "cloud"),
        _code(45, "Foggy", "cloud-fog"),
        _code(48, "Depositing rime fog", "cloud-fog"),
        _code(51, "Light drizzle", "cloud-drizzle"),
        _code(53, "Moderate drizzle", "cloud-drizzle"),
        _code(55, "Dense drizzle", "cloud-drizzle"),
        _code(56, "Light freezing drizzle", "cloud-drizzle"),
        _code(57, "Dense freezing drizzle", "cloud-drizzle"),
        _code(61, "Slight rain", "cloud-rain"),
        _code(63, "Moderate rain", "cloud-rain"),
        _code(65, "Heavy rain", "cloud-rain"),
        _code(66, "Light freezing rain", "cloud-rain"),
        _code(67, "Heavy freezing rain", "cloud-rain"),
        _code(71, "Slight snow", "cloud-snow"),
        _code(73, "Moderate snow", "cloud-snow"),
        _code(75, "Heavy snow", "cloud-snow"),
        _code(77, "Snow grains", "cloud-snow"),
        _code(80, "Slight rain showers", "cloud-rain"),
        _code(81, "Moderate rain showers", "cloud-rain"),
        _code(82, "Violent rain showers", "cloud-rain"),
        _code(85, "Slight snow showers", "cloud-snow"),
        _code(86, "Heavy snow showers", "cloud-snow"),
        _code(95, "Thunderstorm", "cloud-lightning"),
        _code(96, "Thunderstorm with slight hail", "cloud-lightning"),
        _code(99, "Thunderstorm with heavy hail", "cloud-lightning"),
    )
}

WIND_DIRECTIONS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def get_weather_info(code: int, is_day: bool = True) -> WeatherCode:
    """
    Look up a WMO code, picking the day or night icon.

    Unknown codes map to an "Unknown" entry with a help icon.
    """
    info = WEATHER_CODES.get(code)
    if info is None:
        return WeatherCode(code, "Unknown", "help-circle", "help-circle", "help-circle")
    icon = info.day_icon if is_day else info.night_icon
    return WeatherCode(info.code, info.description, icon, info.day_icon, info.night_icon)


def get_wind_direction(degrees: float) -> str:
    """16-point compass direction for a bearing in degrees."""
    index = int((degrees % 360) / 22.5 + 0.5) % 16
    return WIND_DIRECTIONS[index]


def get_uv_index_level(uv_index: float) -> Tuple[str, str]:
    """(level, colour name) for a UV index."""
    if uv_index <= 2:
        return "Low", "green"
    if uv_index <= 5:
        return "Moderate", "yellow"
    if uv_index <= 7:
        return "High", "orange"
    if uv_index <= 10:
        return "Very High", "red"
    return "Extreme", "purple"


def _to_zone(timestamp: str, timezone: str) -> datetime:
    try:
        zone = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        zone = dt_timezone.utc
    moment = parse_timestamp(timestamp)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def _hour_minute(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def _day_label(moment: datetime) -> str:
    return f"{moment.strftime('%a')}, {moment.strftime('%b')} {moment.day}"


def format_time(timestamp: str, timezone: str) -> str:
    """e.g. "3:05 PM". Naive timestamps are taken as already local to timezone."""
    return _hour_minute(_to_zone(timestamp, timezone))


def format_date(timestamp: str, timezone: str) -> str:
    """e.g. "Mon, Jan 1"."""
    return _day_label(_to_zone(timestamp, timezone))


def format_date_time(timestamp: str, timezone: str) -> str:
    """e.g. "Mon, Jan 1, 3:05 PM"."""
    moment = _to_zone(timestamp, timezone)
    return f"{_day_label(moment)}, {_hour_minute(moment)}"


def format_current_lines(snapshot: WeatherSnapshot, preferences: Preferences) -> Tuple[str, str, str]:
    """Three text lines describing the current conditions of a snapshot."""
    location = snapshot.location
    header = f"{location.name}, {location.country}"
    current = snapshot.current
    if current is None:
        return header, "No current conditions", ""

    temp_unit = preferences.temperature_unit
    wind_unit = preferences.wind_speed_unit
    temp = convert_temperature(current.temperature_2m, temp_unit)
    wind = convert_wind_speed(current.wind_speed_10m, wind_unit)

    parts = [f"{temp}{temperature_symbol(temp_unit)}"]
    if current.weather_code is not None:
        parts.append(get_weather_info(current.weather_code, current.is_day).description)
    wind_text = f"Wind {wind} {wind_speed_symbol(wind_unit)}"
    if current.wind_direction_10m is not None:
        wind_text += f" {get_wind_direction(current.wind_direction_10m)}"
    parts.append(wind_text)
    if current.uv_index is not None:
        level, _ = get_uv_index_level(current.uv_index)
        parts.append(f"UV {round_half_away(current.uv_index)} ({level})")

    updated = format_date_time(current.time, location.timezone)
    return header, "  ".join(parts), f"Updated {updated}"


def format_daily_line(summary: DailySummary, preferences: Preferences) -> str:
    temp_unit = preferences.temperature_unit
    wind_unit = preferences.wind_speed_unit
    high = convert_temperature(summary.max_temp, temp_unit)
    low = convert_temperature(summary.min_temp, temp_unit)
    wind = convert_wind_speed(summary.max_wind_speed, wind_unit)
    symbol = temperature_symbol(temp_unit)
    return (
        f"{format_date(summary.date, 'UTC')}  {high}{symbol} / {low}{symbol}  "
        f"Hum {summary.avg_humidity}%  Wind {wind} {wind_speed_symbol(wind_unit)}"
    )


def format_hourly_line(reading: HourlyReading, preferences: Preferences, timezone: str) -> str:
    temp_unit = preferences.temperature_unit
    wind_unit = preferences.wind_speed_unit
    temp = convert_temperature(reading.temperature_2m, temp_unit)
    wind = convert_wind_speed(reading.wind_speed_10m, wind_unit)
    return (
        f"{format_time(reading.time, timezone):>8}  {temp}{temperature_symbol(temp_unit)}  "
        f"Hum {round_half_away(reading.relative_humidity_2m)}%  Wind {wind} {wind_speed_symbol(wind_unit)}"
    )
