"""Tests for preference persistence."""
import json

import pytest
from preference_storage import PreferenceStorage
from weather_data import Location, Preferences


@pytest.fixture
def storage(tmp_path):
    return PreferenceStorage(str(tmp_path / "nested" / "storage.json"))


def test_load_missing_file_gives_defaults(storage):
    assert storage.load() == ([], Preferences())


def test_save_and_load(storage):
    recent = [
        Location(2, "Oslo", 59.91, 10.75, "Norway", "Europe/Oslo"),
        Location(1, "Paris", 48.85, 2.35, "France", "Europe/Paris"),
    ]
    preferences = Preferences("fahrenheit", "mph", "dark")

    storage.save(recent, preferences)

    assert storage.load() == (recent, preferences)


def test_file_layout(storage):
    storage.save([], Preferences())

    with open(storage.path, encoding="utf-8") as f:
        document = json.load(f)

    assert document == {
        "weather-storage": {
            "state": {
                "recentLocations": [],
                "preferences": {"temperatureUnit": "celsius", "windSpeedUnit": "kmh", "theme": "auto"},
            },
            "version": 0,
        }
    }


def test_other_namespaces_preserved(storage):
    storage.save([], Preferences())
    PreferenceStorage(storage.path, namespace="other").save([], Preferences(theme="light"))

    storage.save([], Preferences(theme="dark"))

    assert PreferenceStorage(storage.path, namespace="other").load()[1].theme == "light"
    assert storage.load()[1].theme == "dark"


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")

    assert PreferenceStorage(str(path)).load() == ([], Preferences())


def test_invalid_saved_unit_gives_defaults(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({
        "weather-storage": {"state": {"preferences": {"temperatureUnit": "kelvin"}}}
    }), encoding="utf-8")

    assert PreferenceStorage(str(path)).load() == ([], Preferences())
