"""Tests for the weather store's synchronous state operations."""
import pytest
from open_meteo_gateway import WeatherGateway
from preference_storage import PreferenceStorage
from weather_data import Location, Preferences
from weather_store import WeatherStore


def make_location(location_id, name=None):
    return Location(
        id=location_id,
        name=name or f"Place {location_id}",
        latitude=float(location_id),
        longitude=float(location_id),
        country="Testland",
        timezone="UTC",
    )


@pytest.fixture
def store():
    return WeatherStore(WeatherGateway())


def test_initial_state(store):
    assert store.current_weather is None
    assert store.historical_weather is None
    assert store.loading is False
    assert store.error is None
    assert store.current_location is None
    assert store.recent_locations == []
    assert store.preferences == Preferences()


def test_add_recent_location_puts_newest_first(store):
    store.add_recent_location(make_location(1))
    store.add_recent_location(make_location(2))
    assert [loc.id for loc in store.recent_locations] == [2, 1]


def test_add_duplicate_moves_to_front(store):
    for location_id in (1, 2, 3):
        store.add_recent_location(make_location(location_id))

    store.add_recent_location(make_location(1, name="Renamed"))

    assert [loc.id for loc in store.recent_locations] == [1, 3, 2]
    assert store.recent_locations[0].name == "Renamed"


def test_recent_locations_capped_at_five(store):
    for location_id in range(1, 7):
        store.add_recent_location(make_location(location_id))

    assert [loc.id for loc in store.recent_locations] == [6, 5, 4, 3, 2]


def test_remove_recent_location(store):
    for location_id in (1, 2, 3):
        store.add_recent_location(make_location(location_id))

    store.remove_recent_location(2)
    assert [loc.id for loc in store.recent_locations] == [3, 1]

    store.remove_recent_location(99)
    assert [loc.id for loc in store.recent_locations] == [3, 1]


def test_preference_setters(store):
    store.set_temperature_unit("fahrenheit")
    store.set_wind_speed_unit("mph")
    store.set_theme("dark")

    assert store.preferences == Preferences("fahrenheit", "mph", "dark")


def test_invalid_preference_rejected(store):
    with pytest.raises(ValueError):
        store.set_wind_speed_unit("knots")
    assert store.preferences.wind_speed_unit == "kmh"


def test_subscribe_and_unsubscribe(store):
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.loading))

    store.set_loading(True)
    unsubscribe()
    store.set_loading(False)

    assert seen == [True]


def test_failing_listener_does_not_block_others(store):
    seen = []

    def broken(_):
        raise RuntimeError("listener bug")

    store.subscribe(broken)
    store.subscribe(lambda s: seen.append(s.error))

    store.set_error("Location not found")

    assert store.error == "Location not found"
    assert seen == ["Location not found"]


def test_location_change_keeps_historical_by_default(store):
    store.set_current_location(make_location(1))
    store.historical_weather = object()

    store.set_current_location(make_location(2))

    assert store.historical_weather is not None


def test_location_change_can_clear_historical():
    store = WeatherStore(WeatherGateway(), clear_historical_on_location_change=True)
    store.set_current_location(make_location(1))
    store.historical_weather = object()

    store.set_current_location(make_location(1))
    assert store.historical_weather is not None

    store.set_current_location(make_location(2))
    assert store.historical_weather is None


def test_persists_recents_and_preferences(tmp_path):
    path = str(tmp_path / "storage.json")
    store = WeatherStore(WeatherGateway(), storage=PreferenceStorage(path))
    store.add_recent_location(make_location(7, "Oslo"))
    store.set_temperature_unit("fahrenheit")
    store.set_loading(True)

    restored = WeatherStore(WeatherGateway(), storage=PreferenceStorage(path))

    assert [loc.name for loc in restored.recent_locations] == ["Oslo"]
    assert restored.preferences.temperature_unit == "fahrenheit"
    assert restored.loading is False
    assert restored.current_location is None


def test_request_ids_increase(store):
    first = store.next_request_id()
    second = store.next_request_id()
    assert second > first
    assert store.is_latest_request(second)
    assert not store.is_latest_request(first)
