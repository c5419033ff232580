"""Weather domain model - pure data structures independent of any API."""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

TEMPERATURE_UNITS = ("celsius", "fahrenheit")
WIND_SPEED_UNITS = ("kmh", "mph")
THEMES = ("light", "dark", "auto")

_last_synthetic_id = 0


def synthetic_location_id() -> int:
    """Millisecond timestamp id for locations that have no geocoder id."""
    global _last_synthetic_id
    candidate = int(time.time() * 1000)
    if candidate <= _last_synthetic_id:
        candidate = _last_synthetic_id + 1
    _last_synthetic_id = candidate
    return candidate


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


@dataclass(frozen=True)
class Location:
    """A named place. Two locations are the same iff their ids match."""
    id: int
    name: str
    latitude: float
    longitude: float
    country: str
    timezone: str

    @classmethod
    def from_geocoding(cls, result: Dict[str, Any]) -> "Location":
        """Build a location from one entry of a geocoding `results` array."""
        return cls(
            id=int(result["id"]),
            name=result["name"],
            latitude=float(result["latitude"]),
            longitude=float(result["longitude"]),
            country=result.get("country") or "Unknown",
            timezone=result.get("timezone") or "UTC",
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            country=data["country"],
            timezone=data["timezone"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "country": self.country,
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class CurrentConditions:
    """Current values. Variables the request did not ask for stay None."""
    time: str
    temperature_2m: float
    wind_speed_10m: float
    wind_direction_10m: Optional[float] = None
    weather_code: Optional[int] = None
    is_day: bool = True
    uv_index: Optional[float] = None


@dataclass(frozen=True)
class HourlyReading:
    """One hour across the four aligned hourly arrays."""
    time: str
    temperature_2m: float
    relative_humidity_2m: float
    wind_speed_10m: float


@dataclass(frozen=True)
class HourlySeries:
    """
    Index-aligned hourly arrays.

    Index i of every array describes the same hour, so all four
    must have the same length.
    """
    time: List[str]
    temperature_2m: List[float]
    relative_humidity_2m: List[float]
    wind_speed_10m: List[float]

    def __post_init__(self):
        lengths = {
            len(self.time),
            len(self.temperature_2m),
            len(self.relative_humidity_2m),
            len(self.wind_speed_10m),
        }
        if len(lengths) != 1:
            raise ValueError(
                "Hourly arrays must share one length: "
                f"time={len(self.time)} temperature_2m={len(self.temperature_2m)} "
                f"relative_humidity_2m={len(self.relative_humidity_2m)} "
                f"wind_speed_10m={len(self.wind_speed_10m)}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HourlySeries":
        return cls(
            time=list(data["time"]),
            temperature_2m=list(data["temperature_2m"]),
            relative_humidity_2m=list(data["relative_humidity_2m"]),
            wind_speed_10m=list(data["wind_speed_10m"]),
        )

    def __len__(self) -> int:
        return len(self.time)

    def __iter__(self) -> Iterator[HourlyReading]:
        for index, timestamp in enumerate(self.time):
            yield HourlyReading(
                time=timestamp,
                temperature_2m=self.temperature_2m[index],
                relative_humidity_2m=self.relative_humidity_2m[index],
                wind_speed_10m=self.wind_speed_10m[index],
            )


@dataclass(frozen=True)
class DailySummary:
    """Aggregate of one calendar day's hourly readings."""
    date: str  # YYYY-MM-DD
    max_temp: float
    min_temp: float
    avg_humidity: int
    max_wind_speed: float
    hourly_data: List[HourlyReading] = field(default_factory=list)


@dataclass(frozen=True)
class WeatherResponse:
    """Parsed body of a forecast endpoint response."""
    latitude: float
    longitude: float
    timezone: str
    hourly: HourlySeries
    current: Optional[CurrentConditions] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "WeatherResponse":
        current_data = data.get("current")
        current = None
        if current_data:
            current = CurrentConditions(
                time=current_data["time"],
                temperature_2m=float(current_data["temperature_2m"]),
                wind_speed_10m=float(current_data["wind_speed_10m"]),
                wind_direction_10m=_optional_float(current_data.get("wind_direction_10m")),
                weather_code=_optional_int(current_data.get("weather_code")),
                is_day=bool(current_data.get("is_day", 1)),
                uv_index=_optional_float(current_data.get("uv_index")),
            )
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            timezone=data["timezone"],
            hourly=HourlySeries.from_dict(data["hourly"]),
            current=current,
        )


@dataclass(frozen=True)
class WeatherSnapshot:
    """One fetched weather payload bound to a location."""
    hourly: HourlySeries
    location: Location
    current: Optional[CurrentConditions] = None

    @classmethod
    def from_response(cls, response: WeatherResponse, location: Location) -> "WeatherSnapshot":
        return cls(hourly=response.hourly, location=location, current=response.current)


@dataclass(frozen=True)
class Preferences:
    temperature_unit: str = "celsius"
    wind_speed_unit: str = "kmh"
    theme: str = "auto"

    def __post_init__(self):
        if self.temperature_unit not in TEMPERATURE_UNITS:
            raise ValueError(f"Unknown temperature unit: {self.temperature_unit!r}")
        if self.wind_speed_unit not in WIND_SPEED_UNITS:
            raise ValueError(f"Unknown wind speed unit: {self.wind_speed_unit!r}")
        if self.theme not in THEMES:
            raise ValueError(f"Unknown theme: {self.theme!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preferences":
        return cls(
            temperature_unit=data.get("temperatureUnit", "celsius"),
            wind_speed_unit=data.get("windSpeedUnit", "kmh"),
            theme=data.get("theme", "auto"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "temperatureUnit": self.temperature_unit,
            "windSpeedUnit": self.wind_speed_unit,
            "theme": self.theme,
        }
