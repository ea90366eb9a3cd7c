"""Thread-safe TTL cache for current-conditions snapshots."""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from weather_data import WeatherSnapshot

DEFAULT_TTL_SECONDS = 600  # 10 minutes


@dataclass(frozen=True)
class CacheEntry:
    snapshot: WeatherSnapshot
    created_at: float


class WeatherCache:
    """
    Process-lifetime cache keyed by location.

    A lookup older than the TTL is a miss; the stale entry is dropped lazily
    on that lookup or overwritten by the next put. Entries are never refreshed
    in place. One lock serializes every read-check and write.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, time_func: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._time_func = time_func
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[WeatherSnapshot]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            age = self._time_func() - entry.created_at
            if age > self.ttl_seconds:
                logging.debug(f"Cache entry '{key}' expired (age: {age:.1f}s > TTL: {self.ttl_seconds}s)")
                del self._entries[key]
                return None
            logging.debug(f"Cache hit for '{key}' (age: {age:.1f}s)")
            return entry.snapshot

    def put(self, key: str, snapshot: WeatherSnapshot) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(snapshot=snapshot, created_at=self._time_func())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
