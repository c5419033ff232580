"""Open-Meteo and Nominatim gateway with response caching."""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from weather_cache import DEFAULT_TTL_SECONDS, ResponseCache
from weather_data import Location, WeatherResponse
from weather_provider import (
    DeviceLocatorBase,
    NetworkError,
    ReverseGeocodeError,
    UnsupportedError,
)

HOURLY_VARIABLES = "temperature_2m,relative_humidity_2m,wind_speed_10m"
CURRENT_VARIABLES = "temperature_2m,wind_speed_10m,wind_direction_10m,weather_code,is_day,uv_index"
HISTORICAL_PAST_DAYS = 10
SEARCH_RESULT_COUNT = 10

FALLBACK_PLACE_NAME = "Current Location"
FALLBACK_COUNTRY = "Unknown"

# Most specific first
LOCALITY_FIELDS = ("city", "town", "village", "suburb", "county", "state", "country")


class WeatherGateway:
    """
    Async front for every outbound call the dashboard makes.

    Uses the Open-Meteo forecast and geocoding APIs (no key required) and
    Nominatim for reverse geocoding. Weather and geocoding responses are
    cached for ten minutes in two gateway-owned caches.
    """

    FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
    GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
    REVERSE_GEOCODING_URL = "https://nominatim.openstreetmap.org/reverse"

    def __init__(
        self,
        locator: Optional[DeviceLocatorBase] = None,
        weather_cache: Optional[ResponseCache] = None,
        geocoding_cache: Optional[ResponseCache] = None,
        user_agent: str = "WeatherDashboard/1.0",
        timeout: float = 30,
        cache_ttl_seconds: float = DEFAULT_TTL_SECONDS,
    ):
        """
        Initialize the gateway.

        Args:
            locator: Device location source, None if the platform has none
            weather_cache: Cache for forecast responses
            geocoding_cache: Cache for search results
            user_agent: Client identifier sent to Nominatim
            timeout: HTTP request timeout in seconds
            cache_ttl_seconds: TTL for caches created here
        """
        self.locator = locator
        self.weather_cache = weather_cache or ResponseCache(cache_ttl_seconds, name="weather cache")
        self.geocoding_cache = geocoding_cache or ResponseCache(cache_ttl_seconds, name="geocoding cache")
        self.user_agent = user_agent
        self.timeout = timeout

    async def fetch_current_weather(
        self, lat: float, lon: float, timezone: str = "auto"
    ) -> WeatherResponse:
        """
        Current conditions plus the hourly forecast series.

        Raises:
            NetworkError: If the request or the response parsing fails
        """
        key = f"weather_{lat}_{lon}_{timezone}"
        cached = self.weather_cache.get(key)
        if cached is not None:
            return cached

        params = {
            "latitude": lat,
            "longitude": lon,
            "current": CURRENT_VARIABLES,
            "hourly": HOURLY_VARIABLES,
            "timezone": timezone,
        }
        try:
            data = await asyncio.to_thread(self._get_json, self.FORECAST_URL, params)
            weather = WeatherResponse.from_json(data)
        except (NetworkError, KeyError, ValueError, TypeError) as e:
            logging.error(f"Error fetching weather data: {e}")
            raise NetworkError("Failed to fetch weather data") from e

        self.weather_cache.set(key, weather)
        return weather

    async def fetch_historical_weather(
        self, lat: float, lon: float, timezone: str = "auto"
    ) -> WeatherResponse:
        """
        Hourly series covering the trailing ten days.

        Raises:
            NetworkError: If the request or the response parsing fails
        """
        key = f"historical_{lat}_{lon}_{timezone}"
        cached = self.weather_cache.get(key)
        if cached is not None:
            return cached

        params = {
            "latitude": lat,
            "longitude": lon,
            "past_days": HISTORICAL_PAST_DAYS,
            "hourly": HOURLY_VARIABLES,
            "timezone": timezone,
        }
        try:
            data = await asyncio.to_thread(self._get_json, self.FORECAST_URL, params)
            weather = WeatherResponse.from_json(data)
        except (NetworkError, KeyError, ValueError, TypeError) as e:
            logging.error(f"Error fetching historical weather data: {e}")
            raise NetworkError("Failed to fetch historical weather data") from e

        self.weather_cache.set(key, weather)
        return weather

    async def search_locations(self, query: str) -> List[Location]:
        """
        Candidate locations for a place name, best match first.

        Returns:
            List of Location, empty when nothing matches

        Raises:
            NetworkError: If the request or the response parsing fails
        """
        key = f"geocode_{query}"
        cached = self.geocoding_cache.get(key)
        if cached is not None:
            return list(cached)

        params = {
            "name": query,
            "count": SEARCH_RESULT_COUNT,
            "language": "en",
            "format": "json",
        }
        try:
            data = await asyncio.to_thread(self._get_json, self.GEOCODING_URL, params)
            results = data.get("results")
            if not results:
                logging.info(f"No locations found for '{query}'")
                return []
            locations = [Location.from_geocoding(result) for result in results]
        except (NetworkError, AttributeError, KeyError, ValueError, TypeError) as e:
            logging.error(f"Error searching location: {e}")
            raise NetworkError("Failed to search location") from e

        logging.info(f"Found {len(locations)} locations for '{query}'")
        self.geocoding_cache.set(key, locations)
        return list(locations)

    async def resolve_device_location(self) -> Tuple[float, float]:
        """
        Device latitude and longitude.

        Raises:
            UnsupportedError: If no location source is configured
            LocationError: If the source is denied, times out or fails
        """
        if self.locator is None:
            raise UnsupportedError()
        return await asyncio.to_thread(self.locator.locate)

    async def reverse_geocode(self, lat: float, lon: float) -> Tuple[str, str]:
        """
        Best-effort (name, country) for a coordinate pair. Never raises.
        """
        try:
            return await asyncio.to_thread(self._reverse_geocode, lat, lon)
        except ReverseGeocodeError as e:
            logging.warning(f"Reverse geocoding error: {e}")
        except Exception as e:
            logging.warning(f"Unexpected reverse geocoding error: {e}", exc_info=True)
        return FALLBACK_PLACE_NAME, FALLBACK_COUNTRY

    def clear_cache(self) -> None:
        self.weather_cache.clear()
        self.geocoding_cache.clear()

    def _reverse_geocode(self, lat: float, lon: float) -> Tuple[str, str]:
        params = {
            "lat": lat,
            "lon": lon,
            "format": "json",
            "addressdetails": 1,
            "accept-language": "en",
        }
        try:
            data = self._get_json(
                self.REVERSE_GEOCODING_URL,
                params,
                headers={"User-Agent": self.user_agent},
            )
            address = data.get("address")
        except (NetworkError, AttributeError) as e:
            raise ReverseGeocodeError(str(e)) from e

        if not isinstance(address, dict) or not address:
            return FALLBACK_PLACE_NAME, FALLBACK_COUNTRY

        name = next(
            (str(address[field]) for field in LOCALITY_FIELDS if address.get(field)),
            FALLBACK_PLACE_NAME,
        )
        return name, str(address.get("country") or FALLBACK_COUNTRY)

    def _get_json(
        self,
        url: str,
        params: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Blocking GET returning the decoded JSON body."""
        try:
            logging.info(f"Making API request: {url}")
            logging.debug(f"Request parameters: {params}")
            response = requests.get(url, params=params, headers=headers, timeout=self.timeout)
            logging.info(f"API response status: {response.status_code}")
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise NetworkError(f"Network error: {e}") from e

        if not response.ok:
            logging.error(
                f"API request failed: HTTP {response.status_code}, body: {response.text[:200]}"
            )
            raise NetworkError(f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise NetworkError(f"Failed to parse response: {e}") from e

        if not isinstance(data, dict):
            raise NetworkError(f"Unexpected response body: {str(data)[:200]}")
        logging.debug(f"API response (truncated): {str(data)[:500]}...")
        return data
