"""Cache Abstraction Layer

Response cache used by the transport client. Only an in-memory backend is
provided; the service keeps no state beyond the running process.
"""

from __future__ import annotations

import hashlib
import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel


class CacheConfig(BaseModel):
    """Cache settings"""

    ttl: int = 300  # seconds
    prefix: str = "dutch_legal"


@dataclass(frozen=True)
class CacheEntry:
    """One cached response payload"""

    data: Any
    timestamp: float
    etag: Optional[str] = None

    def age(self, now: float) -> float:
        return now - self.timestamp


def request_signature(path: str, params: Optional[Mapping[str, str]] = None) -> str:
    """Canonical identity of a request: path plus sorted, serialized params"""
    serialized = json.dumps(dict(params or {}), sort_keys=True, ensure_ascii=False)
    return f"{path}-{serialized}"


class Cache(ABC):
    """Cache abstract class"""

    def __init__(self, config: CacheConfig):
        self.config = config

    def _make_key(self, *args: Any) -> str:
        """Build a cache key, hashing the tail when it gets too long"""
        key_parts = [self.config.prefix] + [str(arg) for arg in args]
        key_string = ":".join(key_parts)

        if len(key_string) > 250:
            md5_hash = hashlib.md5(key_string.encode()).hexdigest()
            key_parts[-1] = md5_hash
            key_string = ":".join(key_parts)

        return key_string

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Return a live entry or None; stale entries are evicted"""

    @abstractmethod
    async def set(self, key: str, value: Any, etag: str | None = None) -> CacheEntry:
        """Store a value, replacing any previous entry for the key"""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Drop a single key"""

    @abstractmethod
    async def clear(self) -> int:
        """Drop every entry

        Returns:
            Number of removed entries
        """

    async def get_request(
        self, path: str, params: Optional[Mapping[str, str]] = None
    ) -> CacheEntry | None:
        return await self.get(self._make_key(request_signature(path, params)))

    async def set_request(
        self,
        path: str,
        params: Optional[Mapping[str, str]],
        value: Any,
        etag: str | None = None,
    ) -> CacheEntry:
        return await self.set(self._make_key(request_signature(path, params)), value, etag)
