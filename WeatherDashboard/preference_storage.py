"""JSON file persistence for recent locations and preferences."""
import json
import logging
import os
from typing import List, Tuple

from weather_data import Location, Preferences

STORAGE_NAMESPACE = "weather-storage"
STORAGE_VERSION = 0


class PreferenceStorage:
    """
    Persists the two long-lived store fields under a fixed namespace.

    The file holds {"weather-storage": {"state": {...}, "version": 0}} so
    other namespaces can share it.
    """

    def __init__(self, path: str, namespace: str = STORAGE_NAMESPACE):
        self.path = path
        self.namespace = namespace

    def load(self) -> Tuple[List[Location], Preferences]:
        """Restore saved state, or defaults when nothing usable is stored."""
        if not os.path.exists(self.path):
            return [], Preferences()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
            state = document.get(self.namespace, {}).get("state", {})
            recent = [Location.from_dict(item) for item in state.get("recentLocations", [])]
            preferences = Preferences.from_dict(state.get("preferences", {}))
        except (OSError, AttributeError, KeyError, ValueError, TypeError) as e:
            logging.warning(f"Ignoring unreadable preference file {self.path}: {e}")
            return [], Preferences()

        logging.debug(f"Restored {len(recent)} recent locations from {self.path}")
        return recent, preferences

    def save(self, recent_locations: List[Location], preferences: Preferences) -> None:
        document = {}
        if os.path.exists(self.path):
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    document = json.load(f)
            except (OSError, ValueError) as e:
                logging.warning(f"Overwriting unreadable preference file {self.path}: {e}")
            if not isinstance(document, dict):
                document = {}

        document[self.namespace] = {
            "state": {
                "recentLocations": [loc.to_dict() for loc in recent_locations],
                "preferences": preferences.to_dict(),
            },
            "version": STORAGE_VERSION,
        }

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
        os.replace(tmp_path, self.path)
