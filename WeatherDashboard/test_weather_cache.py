"""Tests for the response cache."""
import pytest
from weather_cache import ResponseCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def test_set_then_get(clock):
    cache = ResponseCache(clock=clock)
    cache.set("weather_1_2_auto", {"temp": 20})
    assert cache.get("weather_1_2_auto") == {"temp": 20}


def test_missing_key_is_absent(clock):
    cache = ResponseCache(clock=clock)
    assert cache.get("nope") is None


def test_entry_expires_after_ttl(clock):
    cache = ResponseCache(clock=clock)
    cache.set("k", "v")

    clock.now += 599
    assert cache.get("k") == "v"

    clock.now += 2  # 10 minutes + 1 second
    assert cache.get("k") is None


def test_entry_at_exact_ttl_is_stale(clock):
    cache = ResponseCache(ttl_seconds=60, clock=clock)
    cache.set("k", "v")
    clock.now += 60
    assert cache.get("k") is None


def test_stale_entry_dropped_only_on_get(clock):
    cache = ResponseCache(ttl_seconds=1, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    clock.now += 5

    assert len(cache) == 2
    cache.get("a")
    assert len(cache) == 1


def test_set_refreshes_timestamp(clock):
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    cache.set("k", "old")
    clock.now += 8
    cache.set("k", "new")
    clock.now += 8
    assert cache.get("k") == "new"


def test_clear(clock):
    cache = ResponseCache(clock=clock)
    cache.set("k", "v")
    cache.clear()
    assert len(cache) == 0
    assert cache.get("k") is None
