"""Location resolution flows: search or device location, then weather."""
import logging
from typing import TYPE_CHECKING, Optional

from weather_data import Location, WeatherSnapshot, synthetic_location_id
from weather_provider import LocationNotFoundError, WeatherDashboardError

if TYPE_CHECKING:
    from open_meteo_gateway import WeatherGateway
    from weather_store import WeatherStore

UNKNOWN_LOCATION_NAME = "Unknown Location"


class LocationResolutionFlow:
    """
    Runs the user-triggered loading flows against a WeatherStore.

    Each call is an independent Idle -> Loading -> Success/Failed run. A
    new call does not cancel one already in flight; whichever finishes last
    owns the final state unless the store discards stale responses.

    Every flow catches its own failures and records them in store.error,
    so callers never see an exception.
    """

    def __init__(self, store: "WeatherStore", gateway: "WeatherGateway"):
        self.store = store
        self.gateway = gateway

    async def fetch_weather(
        self,
        lat: float,
        lon: float,
        timezone: str = "auto",
        location: Optional[Location] = None,
    ) -> None:
        """Weather-fetch sub-flow as a standalone action."""
        request_id = self.store.next_request_id()
        await self._load_weather(request_id, lat, lon, timezone, location)

    async def fetch_historical_weather(
        self,
        lat: float,
        lon: float,
        timezone: str = "auto",
        location: Optional[Location] = None,
    ) -> None:
        store = self.store
        try:
            store.set_loading(True)
            store.set_error(None)
            response = await self.gateway.fetch_historical_weather(lat, lon, timezone or "auto")
            store.set_historical_weather(
                WeatherSnapshot.from_response(response, location or _placeholder_location(response))
            )
        except Exception as e:
            store.set_error(_error_message(e, "Failed to fetch historical weather data"))
        finally:
            store.set_loading(False)

    async def ensure_historical_weather(self) -> bool:
        """
        Fetch historical weather once a current snapshot exists.

        Returns:
            True if a fetch was issued
        """
        current = self.store.current_weather
        if current is None or self.store.historical_weather is not None:
            return False
        await self.fetch_historical_weather(
            current.location.latitude,
            current.location.longitude,
            current.location.timezone,
        )
        return True

    async def search_and_set_location(self, query: str) -> None:
        """Search -> best match -> current location -> weather."""
        store = self.store
        request_id = store.next_request_id()
        try:
            store.set_loading(True)
            store.set_error(None)

            locations = await self.gateway.search_locations(query)
            if self._superseded(request_id):
                logging.info(f"Discarding superseded search for '{query}'")
                return

            if not locations:
                raise LocationNotFoundError()

            location = locations[0]
            logging.info(f"Resolved '{query}' to {location.name}, {location.country}")
            store.set_current_location(location)
            store.add_recent_location(location)
            await self._load_weather(request_id, location.latitude, location.longitude, "auto", location)
        except Exception as e:
            store.set_error(_error_message(e, "Failed to search location"))
        finally:
            self._finish(request_id)

    async def current_location_weather(self) -> None:
        """Device location -> reverse geocode -> current location -> weather."""
        store = self.store
        request_id = store.next_request_id()
        try:
            store.set_loading(True)
            store.set_error(None)

            lat, lon = await self.gateway.resolve_device_location()
            # Needed up front for the timezone
            weather = await self.gateway.fetch_current_weather(lat, lon, "auto")
            name, country = await self.gateway.reverse_geocode(lat, lon)
            if self._superseded(request_id):
                logging.info("Discarding superseded device location request")
                return

            location = Location(
                id=synthetic_location_id(),
                name=name,
                latitude=lat,
                longitude=lon,
                country=country,
                timezone=weather.timezone or "UTC",
            )
            logging.info(f"Device location resolved to {name}, {country}")
            store.set_current_location(location)
            store.add_recent_location(location)
            await self._load_weather(request_id, lat, lon, "auto", location)
        except Exception as e:
            store.set_error(_error_message(e, "Failed to get current location"))
        finally:
            self._finish(request_id)

    async def _load_weather(
        self,
        request_id: int,
        lat: float,
        lon: float,
        timezone: str,
        location: Optional[Location],
    ) -> None:
        store = self.store
        try:
            store.set_loading(True)
            store.set_error(None)
            response = await self.gateway.fetch_current_weather(lat, lon, timezone)
            if self._superseded(request_id):
                logging.info(f"Discarding stale weather response for {lat}, {lon}")
                return
            store.set_current_weather(
                WeatherSnapshot.from_response(response, location or _placeholder_location(response))
            )
        except Exception as e:
            if not self._superseded(request_id):
                store.set_error(_error_message(e, "Failed to fetch weather data"))
        finally:
            self._finish(request_id)

    def _superseded(self, request_id: int) -> bool:
        return self.store.discard_stale_responses and not self.store.is_latest_request(request_id)

    def _finish(self, request_id: int) -> None:
        if not self._superseded(request_id):
            self.store.set_loading(False)


def _placeholder_location(response) -> Location:
    return Location(
        id=synthetic_location_id(),
        name=UNKNOWN_LOCATION_NAME,
        latitude=response.latitude,
        longitude=response.longitude,
        country="Unknown",
        timezone=response.timezone,
    )


def _error_message(error: Exception, default: str) -> str:
    if isinstance(error, WeatherDashboardError):
        logging.error(f"{default}: {error}")
        return str(error) or default
    logging.exception(f"Unexpected error: {error}")
    return default
