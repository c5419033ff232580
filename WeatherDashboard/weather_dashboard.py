"""Terminal weather dashboard."""
import argparse
import asyncio
import logging
import os
import sys
from typing import Callable, List, Optional, TextIO

from dashboard_config import DashboardConfig, load_config
from daily_aggregator import get_daily_data_from_hourly
from open_meteo_gateway import WeatherGateway
from preference_storage import PreferenceStorage
from search_debounce import DEFAULT_DELAY_SECONDS, DebouncedSearch
from weather_data import TEMPERATURE_UNITS, WIND_SPEED_UNITS, Location
from weather_format import format_current_lines, format_daily_line, format_hourly_line
from weather_store import WeatherStore

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LOG_FILE = os.path.join(BASE_DIR, "weather-dashboard.log")

INTERACTIVE_HELP = (
    "Type a place name to search, a result number to open it,\n"
    ":here for the device location, :history, :hourly, :recent, :refresh, :quit"
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("weather-dashboard")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--search", metavar="QUERY", help="Look up a place by name")
    source.add_argument("--here", action="store_true", help="Use the device location")
    source.add_argument("--location", type=int, metavar="ID", help="Open a recent location")
    source.add_argument("--interactive", "-i", action="store_true", help="Search as you type")
    parser.add_argument("--history", action="store_true", help="Also show the last 10 days")
    parser.add_argument("--hourly", action="store_true", help="Show today hour by hour")
    parser.add_argument("--units", choices=TEMPERATURE_UNITS, help="Temperature unit (saved)")
    parser.add_argument("--wind-units", choices=WIND_SPEED_UNITS, help="Wind speed unit (saved)")
    parser.add_argument("--recent", action="store_true", help="List recent locations")
    parser.add_argument("--forget", type=int, metavar="ID", help="Remove a recent location")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def build_store(config: DashboardConfig) -> WeatherStore:
    gateway = WeatherGateway(
        locator=config.build_locator(),
        user_agent=config.user_agent,
        timeout=config.http_timeout,
        cache_ttl_seconds=config.cache_ttl_seconds,
    )
    store = WeatherStore(gateway, storage=PreferenceStorage(config.storage_path))
    logging.info("Weather store ready (%s recent locations)", len(store.recent_locations))
    return store


def render(store: WeatherStore, show_history: bool, show_hourly: bool = False) -> List[str]:
    """Text lines for the current state of the store."""
    if store.error:
        return [f"Error: {store.error}"]
    if store.current_weather is None:
        return ["No location selected. Use --search QUERY or --here."]

    preferences = store.preferences
    snapshot = store.current_weather
    lines = [line for line in format_current_lines(snapshot, preferences) if line]
    days = get_daily_data_from_hourly(snapshot.hourly)

    if show_hourly and days:
        lines.append("")
        lines.append("Hourly")
        for reading in days[0].hourly_data:
            lines.append("  " + format_hourly_line(reading, preferences, snapshot.location.timezone))

    lines.append("")
    lines.append("Forecast")
    for summary in days:
        lines.append("  " + format_daily_line(summary, preferences))

    if show_history and store.historical_weather is not None:
        lines.append("")
        lines.append("Past days")
        for summary in get_daily_data_from_hourly(store.historical_weather.hourly):
            lines.append("  " + format_daily_line(summary, preferences))
    return lines


def render_recent(store: WeatherStore) -> List[str]:
    if not store.recent_locations:
        return ["No recent locations."]
    return [
        f"  [{loc.id}] {loc.name}, {loc.country} ({loc.latitude:.2f}, {loc.longitude:.2f})"
        for loc in store.recent_locations
    ]


async def open_location(store: WeatherStore, location: Location) -> None:
    """Make location current and load its weather."""
    store.set_current_location(location)
    store.add_recent_location(location)
    await store.fetch_weather(location.latitude, location.longitude, "auto", location)


class InteractiveSession:
    """
    Line-driven dashboard: each input line is a search or a command.

    Searches go through DebouncedSearch so a burst of lines only queries
    the last one. Loading and error transitions are reported through a
    store subscription.
    """

    def __init__(
        self,
        store: WeatherStore,
        input_stream: TextIO = sys.stdin,
        output: Callable[[str], None] = print,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ):
        self.store = store
        self.input_stream = input_stream
        self.output = output
        self.candidates: List[Location] = []
        self.show_history = False
        self.show_hourly = False
        self.search = DebouncedSearch(store.gateway.search_locations, self._show_candidates, delay_seconds)
        self._status = (store.loading, store.error)
        self._unsubscribe = store.subscribe(self._on_change)

    def _on_change(self, store: WeatherStore) -> None:
        was_loading, previous_error = self._status
        self._status = (store.loading, store.error)
        if store.loading:
            if not was_loading:
                self.output("Loading...")
        elif store.error and (was_loading or store.error != previous_error):
            self.output(f"Error: {store.error}")

    def _show_candidates(self, query: str, locations: List[Location]) -> None:
        self.candidates = locations
        if not locations:
            self.output(f"No matches for '{query}'")
            return
        for number, location in enumerate(locations, start=1):
            self.output(f"  {number}. {location.name}, {location.country}")

    def _show_weather(self) -> None:
        if self.store.error:
            return
        for line in render(self.store, self.show_history, self.show_hourly):
            self.output(line)

    async def handle(self, line: str) -> bool:
        """Process one input line. Returns False when the session should end."""
        line = line.strip()
        if not line:
            return True
        if line in (":q", ":quit"):
            return False

        if line.isdigit():
            await self.search.wait()
            index = int(line) - 1
            if not 0 <= index < len(self.candidates):
                self.output(f"No result {line}")
                return True
            await open_location(self.store, self.candidates[index])
            self._show_weather()
        elif line == ":here":
            await self.store.current_location_weather()
            self._show_weather()
        elif line == ":history":
            self.show_history = True
            await self.store.ensure_historical_weather()
            self._show_weather()
        elif line == ":hourly":
            self.show_hourly = not self.show_hourly
            self._show_weather()
        elif line == ":recent":
            for entry in render_recent(self.store):
                self.output(entry)
        elif line == ":refresh":
            await self.refresh()
        elif line.startswith(":"):
            self.output(INTERACTIVE_HELP)
        else:
            self.search.submit(line)
        return True

    async def refresh(self) -> None:
        """Drop cached responses and reload the current location."""
        self.store.gateway.clear_cache()
        location = self.store.current_location
        if location is None:
            self.output("No location selected.")
            return
        await self.store.fetch_weather(location.latitude, location.longitude, "auto", location)
        self._show_weather()

    async def run(self) -> None:
        self.output(INTERACTIVE_HELP)
        try:
            while True:
                line = await asyncio.to_thread(self.input_stream.readline)
                if not line:
                    await self.search.wait()
                    break
                if not await self.handle(line):
                    break
        finally:
            self.search.cancel()
            self._unsubscribe()


async def run(store: WeatherStore, args: argparse.Namespace) -> int:
    if args.units:
        store.set_temperature_unit(args.units)
    if args.wind_units:
        store.set_wind_speed_unit(args.wind_units)
    if args.forget is not None:
        store.remove_recent_location(args.forget)

    if args.interactive:
        await InteractiveSession(store).run()
        return 0

    if args.search:
        await store.search_and_set_location(args.search)
    elif args.here:
        await store.current_location_weather()
    elif args.location is not None:
        location = next((loc for loc in store.recent_locations if loc.id == args.location), None)
        if location is None:
            store.set_error(f"No recent location with id {args.location}")
        else:
            await open_location(store, location)

    if args.history and store.current_weather is not None:
        await store.ensure_historical_weather()

    if args.search or args.here or args.location is not None:
        print("\n".join(render(store, args.history, args.hourly)))
    if args.recent:
        print("Recent locations")
        print("\n".join(render_recent(store)))
    return 1 if store.error else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = load_config()
    store = build_store(config)

    try:
        return asyncio.run(run(store, args))
    except KeyboardInterrupt:
        logging.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
