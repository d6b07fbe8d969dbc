"""In-Memory Cache Implementation

TTL cache guarded by a single lock so concurrent tool calls can share it.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable

from .cache import Cache, CacheConfig, CacheEntry


class InMemoryCache(Cache):
    """In-memory cache with lazy per-key expiry"""

    def __init__(self, config: CacheConfig, clock: Callable[[], float] = time.monotonic):
        super().__init__(config)
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    async def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            if entry.age(self._clock()) > self.config.ttl:
                del self._store[key]
                return None

            return entry

    async def set(self, key: str, value: Any, etag: str | None = None) -> CacheEntry:
        entry = CacheEntry(data=value, timestamp=self._clock(), etag=etag)
        with self._lock:
            self._store[key] = entry
        return entry

    async def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    async def clear(self) -> int:
        with self._lock:
            removed = len(self._store)
            self._store.clear()
        return removed
