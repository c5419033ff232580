"""Hourly-to-daily aggregation - pure functions for testability."""
from datetime import datetime, timezone
from typing import Dict, List

from units import round_half_away
from weather_data import DailySummary, HourlyReading, HourlySeries


def parse_timestamp(timestamp: str) -> datetime:
    """ISO-8601 parse that also accepts a trailing "Z" for UTC."""
    if timestamp.endswith(("Z", "z")):
        timestamp = timestamp[:-1] + "+00:00"
    return datetime.fromisoformat(timestamp)


def utc_day_key(timestamp: str) -> str:
    """
    Calendar-day key (YYYY-MM-DD) of an ISO-8601 timestamp, in UTC.

    Offset-aware timestamps are shifted to UTC before truncating. Naive
    timestamps, which is how Open-Meteo reports local time, are truncated
    as-is, so hours near midnight can land on a neighbouring local day.
    """
    moment = parse_timestamp(timestamp)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


def get_daily_data_from_hourly(series: HourlySeries) -> List[DailySummary]:
    """
    Group an hourly series into per-day summaries.

    Args:
        series: Index-aligned hourly readings

    Returns:
        List of DailySummary sorted ascending by date (empty for an empty series)
    """
    grouped: Dict[str, List[HourlyReading]] = {}
    for reading in series:
        grouped.setdefault(utc_day_key(reading.time), []).append(reading)

    summaries = []
    for day, readings in grouped.items():
        temperatures = [r.temperature_2m for r in readings]
        humidities = [r.relative_humidity_2m for r in readings]
        wind_speeds = [r.wind_speed_10m for r in readings]
        summaries.append(DailySummary(
            date=day,
            max_temp=max(temperatures),
            min_temp=min(temperatures),
            avg_humidity=round_half_away(sum(humidities) / len(humidities)),
            max_wind_speed=max(wind_speeds),
            hourly_data=readings,
        ))

    summaries.sort(key=lambda summary: summary.date)
    return summaries
