"""Client registry: one TransportClient per base address.

Callers sharing an address share the client's cache and connection pool.
The registry is an ordinary object handed to whoever needs clients; the
server modules own one per process, tests build their own.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional
from urllib.parse import urlsplit, urlunsplit

from dutch_legal_mcp.config.settings import settings
from dutch_legal_mcp.utils.logger import get_logger

from .http_client import TransportClient

logger = get_logger(__name__)

ClientFactory = Callable[[str], TransportClient]


def normalize_address(base_address: str) -> str:
    """Trim, drop trailing slashes and lowercase scheme and host"""
    address = (base_address or "").strip().rstrip("/")
    parts = urlsplit(address)
    if not parts.scheme or not parts.netloc:
        return address
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, parts.fragment)
    )


class ClientRegistry:
    """Memoizes transport clients by normalized base address"""

    def __init__(self, factory: Optional[ClientFactory] = None, warn_size: Optional[int] = None):
        self._factory: ClientFactory = factory or TransportClient
        self._clients: dict[str, TransportClient] = {}
        self._lock = threading.Lock()
        self.warn_size = settings.registry_warn_size if warn_size is None else warn_size

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def __contains__(self, base_address: str) -> bool:
        with self._lock:
            return normalize_address(base_address) in self._clients

    def client_for(self, base_address: str) -> TransportClient:
        key = normalize_address(base_address)
        with self._lock:
            client = self._clients.get(key)
            if client is None:
                client = self._factory(key)
                self._clients[key] = client
                logger.debug(f"Created transport client for {key or '<empty>'}")
                if len(self._clients) > self.warn_size:
                    logger.warning(
                        f"Client registry holds {len(self._clients)} base addresses "
                        f"(warn size {self.warn_size}); latest: {key or '<empty>'}"
                    )
            return client

    async def reset(self) -> None:
        """Close and forget every client (and with them, their caches)"""
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            await client.aclose()

    async def aclose(self) -> None:
        await self.reset()
