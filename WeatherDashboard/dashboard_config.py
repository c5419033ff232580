"""Environment configuration for the weather dashboard."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from device_location import IPDeviceLocator, StaticDeviceLocator
from weather_provider import DeviceLocatorBase

DEFAULT_STORAGE_PATH = os.path.join(os.path.expanduser("~"), ".weather-dashboard", "storage.json")
DEFAULT_USER_AGENT = "WeatherDashboard/1.0"


@dataclass
class DashboardConfig:
    storage_path: str = DEFAULT_STORAGE_PATH
    user_agent: str = DEFAULT_USER_AGENT
    cache_ttl_seconds: float = 600
    http_timeout: float = 30
    locator_kind: str = "ip"  # "ip", "static" or "none"
    lat: Optional[float] = None
    lon: Optional[float] = None

    def build_locator(self) -> Optional[DeviceLocatorBase]:
        """Device location source for this configuration, None if disabled."""
        if self.locator_kind == "none":
            return None
        if self.locator_kind == "static":
            return StaticDeviceLocator(self.lat, self.lon)
        return IPDeviceLocator(user_agent=self.user_agent)


def _float_env(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid {name}: {exc}") from exc


def load_config() -> DashboardConfig:
    """
    Read configuration from the environment (and a .env file if present).

    A static locator is chosen automatically when WEATHER_LAT and
    WEATHER_LON are both set and WEATHER_LOCATOR is not.
    """
    load_dotenv()
    lat = _float_env("WEATHER_LAT", None)
    lon = _float_env("WEATHER_LON", None)

    default_locator = "static" if lat is not None and lon is not None else "ip"
    locator_kind = os.getenv("WEATHER_LOCATOR", default_locator).lower()
    if locator_kind not in ("ip", "static", "none"):
        raise SystemExit(f"Invalid WEATHER_LOCATOR: {locator_kind}")
    if locator_kind == "static" and (lat is None or lon is None):
        raise SystemExit("Missing WEATHER_LAT/WEATHER_LON in environment")

    config = DashboardConfig(
        storage_path=os.getenv("WEATHER_STORAGE_PATH", DEFAULT_STORAGE_PATH),
        user_agent=os.getenv("WEATHER_USER_AGENT", DEFAULT_USER_AGENT),
        cache_ttl_seconds=_float_env("WEATHER_CACHE_TTL", 600),
        http_timeout=_float_env("WEATHER_HTTP_TIMEOUT", 30),
        locator_kind=locator_kind,
        lat=lat,
        lon=lon,
    )
    logging.info(
        "Configuration loaded: locator=%s storage=%s cache_ttl=%ss",
        config.locator_kind,
        config.storage_path,
        config.cache_ttl_seconds,
    )
    return config
