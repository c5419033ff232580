"""Process-wide weather state and the operations that mutate it."""
import logging
from dataclasses import replace
from typing import Callable, List, Optional

from location_flow import LocationResolutionFlow
from open_meteo_gateway import WeatherGateway
from preference_storage import PreferenceStorage
from weather_data import Location, Preferences, WeatherSnapshot

MAX_RECENT_LOCATIONS = 5

Listener = Callable[["WeatherStore"], None]


class WeatherStore:
    """
    Single source of truth for the dashboard.

    Construct once at startup and pass it to whatever presents the data.
    Only recent locations and preferences are persisted; everything else
    starts fresh each session.
    """

    def __init__(
        self,
        gateway: WeatherGateway,
        storage: Optional[PreferenceStorage] = None,
        discard_stale_responses: bool = False,
        clear_historical_on_location_change: bool = False,
    ):
        """
        Initialize the store.

        Args:
            gateway: Outbound API access
            storage: Persists recent locations and preferences (optional)
            discard_stale_responses: Drop responses of superseded requests
                instead of letting the last one to finish win
            clear_historical_on_location_change: Drop the historical
                snapshot when the current location changes
        """
        self.gateway = gateway
        self.storage = storage
        self.discard_stale_responses = discard_stale_responses
        self.clear_historical_on_location_change = clear_historical_on_location_change

        self.current_weather: Optional[WeatherSnapshot] = None
        self.historical_weather: Optional[WeatherSnapshot] = None
        self.loading = False
        self.error: Optional[str] = None
        self.current_location: Optional[Location] = None
        self.recent_locations: List[Location] = []
        self.preferences = Preferences()

        self._listeners: List[Listener] = []
        self._request_counter = 0
        self.flow = LocationResolutionFlow(self, gateway)

        if storage is not None:
            self.recent_locations, self.preferences = storage.load()

    # Subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self, persist: bool = False) -> None:
        if persist and self.storage is not None:
            self.storage.save(self.recent_locations, self.preferences)
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logging.error(f"Store listener failed: {e}", exc_info=True)

    # Synchronous mutators

    def set_current_weather(self, weather: Optional[WeatherSnapshot]) -> None:
        self.current_weather = weather
        self._changed()

    def set_historical_weather(self, weather: Optional[WeatherSnapshot]) -> None:
        self.historical_weather = weather
        self._changed()

    def set_loading(self, loading: bool) -> None:
        self.loading = loading
        self._changed()

    def set_error(self, error: Optional[str]) -> None:
        self.error = error
        self._changed()

    def set_current_location(self, location: Location) -> None:
        previous = self.current_location
        self.current_location = location
        if (
            self.clear_historical_on_location_change
            and self.historical_weather is not None
            and (previous is None or previous.id != location.id)
        ):
            logging.debug("Location changed, dropping historical weather")
            self.historical_weather = None
        self._changed()

    def add_recent_location(self, location: Location) -> None:
        """Insert at the front, replacing any entry with the same id."""
        remaining = [loc for loc in self.recent_locations if loc.id != location.id]
        self.recent_locations = [location, *remaining][:MAX_RECENT_LOCATIONS]
        self._changed(persist=True)

    def remove_recent_location(self, location_id: int) -> None:
        self.recent_locations = [loc for loc in self.recent_locations if loc.id != location_id]
        self._changed(persist=True)

    def set_temperature_unit(self, unit: str) -> None:
        self.preferences = replace(self.preferences, temperature_unit=unit)
        self._changed(persist=True)

    def set_wind_speed_unit(self, unit: str) -> None:
        self.preferences = replace(self.preferences, wind_speed_unit=unit)
        self._changed(persist=True)

    def set_theme(self, theme: str) -> None:
        self.preferences = replace(self.preferences, theme=theme)
        self._changed(persist=True)

    # Request ordering

    def next_request_id(self) -> int:
        self._request_counter += 1
        return self._request_counter

    def is_latest_request(self, request_id: int) -> bool:
        return request_id == self._request_counter

    # Async flows

    async def fetch_weather(
        self,
        lat: float,
        lon: float,
        timezone: str = "auto",
        location: Optional[Location] = None,
    ) -> None:
        await self.flow.fetch_weather(lat, lon, timezone, location)

    async def fetch_historical_weather(
        self,
        lat: float,
        lon: float,
        timezone: str = "auto",
        location: Optional[Location] = None,
    ) -> None:
        await self.flow.fetch_historical_weather(lat, lon, timezone, location)

    async def ensure_historical_weather(self) -> bool:
        return await self.flow.ensure_historical_weather()

    async def search_and_set_location(self, query: str) -> None:
        await self.flow.search_and_set_location(query)

    async def current_location_weather(self) -> None:
        await self.flow.current_location_weather()
