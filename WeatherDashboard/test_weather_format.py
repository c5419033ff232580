"""Tests for display formatting helpers."""
import pytest
from weather_data import (
    CurrentConditions,
    DailySummary,
    HourlyReading,
    HourlySeries,
    Location,
    Preferences,
    WeatherSnapshot,
)
from weather_format import (
    format_current_lines,
    format_daily_line,
    format_date,
    format_date_time,
    format_hourly_line,
    format_time,
    get_uv_index_level,
    get_weather_info,
    get_wind_direction,
)


@pytest.fixture
def snapshot():
    """Snapshot for Oslo with current conditions."""
    return WeatherSnapshot(
        hourly=HourlySeries(time=[], temperature_2m=[], relative_humidity_2m=[], wind_speed_10m=[]),
        location=Location(3, "Oslo", 59.91, 10.75, "Norway", "Europe/Oslo"),
        current=CurrentConditions("2024-01-01T15:05", -3.4, 20.0),
    )


def test_weather_info_day_and_night():
    assert get_weather_info(0).icon == "sun"
    assert get_weather_info(0, is_day=False).icon == "moon"
    assert get_weather_info(63).description == "Moderate rain"


def test_weather_info_unknown_code():
    info = get_weather_info(42)
    assert info.description == "Unknown"
    assert info.icon == "help-circle"
    assert info.code == 42


@pytest.mark.parametrize("degrees, expected", [
    (0, "N"), (22.5, "NNE"), (90, "E"), (180, "S"), (270, "W"), (350, "N"), (348, "NNW"),
])
def test_wind_direction(degrees, expected):
    assert get_wind_direction(degrees) == expected


def test_uv_index_levels():
    assert get_uv_index_level(1)[0] == "Low"
    assert get_uv_index_level(5)[0] == "Moderate"
    assert get_uv_index_level(6.5)[0] == "High"
    assert get_uv_index_level(10)[0] == "Very High"
    assert get_uv_index_level(11) == ("Extreme", "purple")


def test_format_time_naive_is_local():
    assert format_time("2024-01-01T15:05", "Europe/Oslo") == "3:05 PM"
    assert format_time("2024-01-01T00:30", "Europe/Oslo") == "12:30 AM"


def test_format_time_converts_aware_timestamps():
    assert format_time("2024-01-01T12:00+00:00", "Europe/Oslo") == "1:00 PM"
    assert format_time("2024-01-01T12:00Z", "Europe/Oslo") == "1:00 PM"


def test_format_time_unknown_timezone_falls_back_to_utc():
    assert format_time("2024-01-01T12:00+00:00", "auto") == "12:00 PM"


def test_format_date():
    assert format_date("2024-01-01T10:00", "Europe/Oslo") == "Mon, Jan 1"


def test_format_date_time():
    assert format_date_time("2024-07-04T09:15", "America/New_York") == "Thu, Jul 4, 9:15 AM"


def test_current_lines_celsius(snapshot):
    header, conditions, updated = format_current_lines(snapshot, Preferences())
    assert header == "Oslo, Norway"
    assert conditions == "-3°C  Wind 20 km/h"
    assert updated == "Updated Mon, Jan 1, 3:05 PM"


def test_current_lines_imperial(snapshot):
    _, conditions, _ = format_current_lines(snapshot, Preferences("fahrenheit", "mph"))
    assert conditions == "26°F  Wind 12 mph"


def test_current_lines_with_conditions():
    snapshot = WeatherSnapshot(
        hourly=HourlySeries(time=[], temperature_2m=[], relative_humidity_2m=[], wind_speed_10m=[]),
        location=Location(3, "Oslo", 59.91, 10.75, "Norway", "Europe/Oslo"),
        current=CurrentConditions(
            "2024-01-01T22:00", -4.0, 9.0,
            wind_direction_10m=225, weather_code=0, is_day=False, uv_index=6.5,
        ),
    )
    _, conditions, _ = format_current_lines(snapshot, Preferences())
    assert conditions == "-4°C  Clear sky  Wind 9 km/h SW  UV 7 (High)"


def test_hourly_line():
    reading = HourlyReading("2024-01-01T15:00", 4.6, 80.4, 12.0)
    assert format_hourly_line(reading, Preferences("fahrenheit", "mph"), "Europe/Oslo") == (
        " 3:00 PM  40°F  Hum 80%  Wind 7 mph"
    )


def test_daily_line():
    summary = DailySummary(
        date="2024-01-01", max_temp=4.6, min_temp=-2.5, avg_humidity=81, max_wind_speed=30.0,
    )
    assert format_daily_line(summary, Preferences()) == (
        "Mon, Jan 1  5°C / -3°C  Hum 81%  Wind 30 km/h"
    )
