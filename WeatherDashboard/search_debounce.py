"""Debounced location search for interactive input."""
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from weather_data import Location
from weather_provider import WeatherDashboardError

DEFAULT_DELAY_SECONDS = 0.3
MIN_QUERY_LENGTH = 2

SearchFn = Callable[[str], Awaitable[List[Location]]]
ResultsFn = Callable[[str, List[Location]], None]


class DebouncedSearch:
    """
    Delays searches until input settles.

    Each submit() cancels the pending one, so only the last query typed
    within the delay window reaches the search function. Queries shorter
    than two characters clear the results without searching.
    """

    def __init__(
        self,
        search: SearchFn,
        on_results: ResultsFn,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ):
        self.search = search
        self.on_results = on_results
        self.delay_seconds = delay_seconds
        self.searching = False
        self._pending: Optional[asyncio.Task] = None

    def submit(self, query: str) -> asyncio.Task:
        """Schedule a search for query. Must be called from a running loop."""
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._run(query))
        return self._pending

    async def wait(self) -> None:
        """Wait for the pending search, if any, to deliver its results."""
        if self._pending is not None:
            await asyncio.wait({self._pending})

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, query: str) -> None:
        await asyncio.sleep(self.delay_seconds)
        if len(query) < MIN_QUERY_LENGTH:
            self.on_results(query, [])
            return

        self.searching = True
        try:
            results = await self.search(query)
        except WeatherDashboardError as e:
            logging.warning(f"Search error: {e}")
            results = []
        finally:
            self.searching = False
        self.on_results(query, results)
