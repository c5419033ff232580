"""Tests for debounced search."""
import asyncio

from search_debounce import DebouncedSearch
from weather_data import Location
from weather_provider import NetworkError

PARIS = Location(1, "Paris", 48.85, 2.35, "France", "Europe/Paris")


class RecordingSearch:
    def __init__(self, error=None):
        self.queries = []
        self.error = error

    async def __call__(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return [PARIS]


def test_only_last_query_is_searched():
    search = RecordingSearch()
    results = []

    async def scenario():
        debounced = DebouncedSearch(search, lambda q, r: results.append((q, r)), delay_seconds=0.01)
        debounced.submit("Pa")
        debounced.submit("Par")
        await debounced.submit("Paris")

    asyncio.run(scenario())

    assert search.queries == ["Paris"]
    assert results == [("Paris", [PARIS])]


def test_short_query_clears_results_without_searching():
    search = RecordingSearch()
    results = []

    async def scenario():
        debounced = DebouncedSearch(search, lambda q, r: results.append((q, r)), delay_seconds=0)
        await debounced.submit("P")

    asyncio.run(scenario())

    assert search.queries == []
    assert results == [("P", [])]


def test_search_error_yields_empty_results():
    search = RecordingSearch(error=NetworkError("Failed to search location"))
    results = []

    async def scenario():
        debounced = DebouncedSearch(search, lambda q, r: results.append((q, r)), delay_seconds=0)
        await debounced.submit("Paris")
        return debounced.searching

    assert asyncio.run(scenario()) is False
    assert results == [("Paris", [])]


def test_cancel_drops_pending_search():
    search = RecordingSearch()
    results = []

    async def scenario():
        debounced = DebouncedSearch(search, lambda q, r: results.append((q, r)), delay_seconds=0.01)
        debounced.submit("Paris")
        debounced.cancel()
        await asyncio.sleep(0.03)

    asyncio.run(scenario())

    assert search.queries == []
    assert results == []


def test_wait_delivers_pending_results():
    search = RecordingSearch()
    results = []

    async def scenario():
        debounced = DebouncedSearch(search, lambda q, r: results.append((q, r)), delay_seconds=0.01)
        debounced.submit("Pa")
        debounced.submit("Paris")
        await debounced.wait()

    asyncio.run(scenario())

    assert results == [("Paris", [PARIS])]


def test_wait_without_pending_search():
    debounced = DebouncedSearch(RecordingSearch(), lambda q, r: None)
    asyncio.run(debounced.wait())
