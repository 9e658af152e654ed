"""Simple in-memory TTL cache shared by every endpoint.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
a result may be fetched twice (once per worker). Entries are never
deleted explicitly; they expire passively and are dropped on the next
lookup.
"""

import threading
import time
from typing import Any, Callable


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float = 10,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._store: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            if key in self._store:
                expires_at, value = self._store[key]
                if self._clock() < expires_at:
                    return value
                del self._store[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            # Re-insert so dict order tracks the most recent population
            self._store.pop(key, None)
            self._store[key] = (self._clock() + ttl, value)
            if len(self._store) > self.max_entries:
                self._evict()

    def _evict(self) -> None:
        now = self._clock()
        for key in [k for k, (expires_at, _) in self._store.items() if expires_at <= now]:
            del self._store[key]
        while len(self._store) > self.max_entries:
            del self._store[next(iter(self._store))]

    def __len__(self) -> int:
        return len(self._store)


def username_key(username: str) -> str:
    return f"user_id_{username.lower()}"


def presence_key(user_ids: list[int]) -> str:
    return "presence_" + "_".join(str(user_id) for user_id in user_ids)


def servers_key(place_id: int, cursor: str | None) -> str:
    return f"servers_{place_id}_{cursor or ''}"


def thumbnail_key(user_id: int, size: str, thumbnail_type: str) -> str:
    return f"thumbnail_{user_id}_{size}_{thumbnail_type}"
