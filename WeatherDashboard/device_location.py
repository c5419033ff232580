"""Device location sources."""
import logging
import time
from typing import Callable, Optional, Tuple

import requests

from weather_provider import DeviceLocatorBase, LocationError

LOCATION_TIMEOUT_SECONDS = 10
MAX_FIX_AGE_SECONDS = 300  # reuse a fix for up to 5 minutes


class StaticDeviceLocator(DeviceLocatorBase):
    """Fixed coordinates, typically from WEATHER_LAT/WEATHER_LON."""

    def __init__(self, lat: float, lon: float):
        if not -90 <= lat <= 90 or not -180 <= lon <= 180:
            raise ValueError(f"Invalid coordinates: {lat}, {lon}")
        self.lat = lat
        self.lon = lon

    def locate(self) -> Tuple[float, float]:
        return self.lat, self.lon


class IPDeviceLocator(DeviceLocatorBase):
    """
    Locates the device through an IP geolocation service.

    A successful fix is reused for up to five minutes so repeated
    "use my location" requests do not hit the service every time.
    """

    BASE_URL = "https://ipapi.co/json/"

    def __init__(
        self,
        url: str = BASE_URL,
        timeout: float = LOCATION_TIMEOUT_SECONDS,
        max_fix_age_seconds: float = MAX_FIX_AGE_SECONDS,
        user_agent: str = "WeatherDashboard/1.0",
        clock: Callable[[], float] = time.time,
    ):
        self.url = url
        self.timeout = timeout
        self.max_fix_age_seconds = max_fix_age_seconds
        self.user_agent = user_agent
        self.clock = clock
        self._fix: Optional[Tuple[float, float]] = None
        self._fix_timestamp = 0.0

    def locate(self) -> Tuple[float, float]:
        now = self.clock()
        if self._fix is not None and now - self._fix_timestamp < self.max_fix_age_seconds:
            logging.debug(f"Reusing device fix (age: {now - self._fix_timestamp:.1f}s)")
            return self._fix

        try:
            logging.info(f"Requesting device location: {self.url}")
            response = requests.get(
                self.url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logging.warning("Device location request timed out")
            raise LocationError("Timeout expired")
        except requests.exceptions.RequestException as e:
            logging.warning(f"Device location request failed: {e}")
            raise LocationError(f"Position unavailable ({e})")

        if not response.ok:
            logging.warning(f"Device location service returned HTTP {response.status_code}")
            if response.status_code in (401, 403):
                raise LocationError("User denied Geolocation")
            raise LocationError(f"Position unavailable (HTTP {response.status_code})")

        try:
            data = response.json()
            if data.get("error"):
                raise LocationError(data.get("reason") or "Position unavailable")
            fix = (float(data["latitude"]), float(data["longitude"]))
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse device location: {e}", exc_info=True)
            raise LocationError("Position unavailable")

        self._fix = fix
        self._fix_timestamp = now
        logging.info(f"Device located at {fix[0]}, {fix[1]}")
        return fix
