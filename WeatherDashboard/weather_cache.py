"""Time-boxed response cache for outbound API calls."""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

DEFAULT_TTL_SECONDS = 600  # 10 minutes


@dataclass
class CacheEntry:
    key: str
    value: Any
    timestamp: float


class ResponseCache:
    """
    Keyed cache that treats entries older than the TTL as absent.

    Stale entries are only dropped when a get() finds them stale; there is
    no capacity limit and nothing survives a restart.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        name: str = "cache",
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Maximum entry age before it is treated as absent
            clock: Returns the current time in seconds
            name: Label used in log messages
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.name = name
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            logging.debug(f"{self.name} miss: {key}")
            return None

        age = self.clock() - entry.timestamp
        if age < self.ttl_seconds:
            logging.debug(f"{self.name} hit: {key} (age: {age:.1f}s, TTL: {self.ttl_seconds}s)")
            return entry.value

        logging.debug(f"{self.name} expired: {key} (age: {age:.1f}s > TTL: {self.ttl_seconds}s)")
        del self._entries[key]
        return None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(key=key, value=value, timestamp=self.clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
