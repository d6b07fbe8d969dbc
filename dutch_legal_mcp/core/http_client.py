"""Transport client for the court data provider.

Wraps ``httpx.AsyncClient`` with:
- a per-attempt timeout
- retry with exponential backoff for network failures, 5xx and 429
- an in-memory TTL cache keyed by path + canonical params

Every failure surfaces as a :class:`~dutch_legal_mcp.core.errors.CaseLawError`
subclass; nothing is retried beyond the policy's ceiling.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import urlsplit

import anyio
import httpx
from tenacity import RetryCallState

from dutch_legal_mcp.config.settings import settings
from dutch_legal_mcp.utils.logger import get_logger

from .cache import Cache, CacheConfig
from .errors import CaseLawError, HttpError, InvalidTarget, NetworkError, ResponseError
from .in_memory_cache import InMemoryCache
from .markup import Node, decode
from .retry import RetryPolicy

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Raw payload plus where it came from"""

    payload: str
    url: str
    from_cache: bool = False
    etag: Optional[str] = None
    status_code: Optional[int] = None


def default_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_retries=settings.retry_max_retries,
        base_delay=settings.retry_base_delay,
        max_delay=settings.retry_max_delay,
        multiplier=settings.retry_multiplier,
    )


class TransportClient:
    """HTTP client bound to one base address"""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        retry_policy: RetryPolicy | None = None,
        cache: Cache | None = None,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.base_url = base_url
        self.timeout = settings.http_timeout if timeout is None else timeout
        self.retry_policy = retry_policy if retry_policy is not None else default_retry_policy()
        self.cache = cache if cache is not None else InMemoryCache(CacheConfig(ttl=settings.cache_ttl))
        self._headers = {
            "Accept": "application/xml",
            "User-Agent": settings.user_agent,
            **dict(headers or {}),
        }
        self._transport = transport
        self._sleep = sleep
        self._client: httpx.AsyncClient | None = None

    def resolve(self, path: str = "") -> str:
        """Join ``path`` onto the base address

        Raises:
            InvalidTarget: empty/relative base, non-http scheme, or an
                absolute URL passed as path.
        """
        base = (self.base_url or "").strip()
        if not base:
            raise InvalidTarget("Base address is empty")

        parts = urlsplit(base)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise InvalidTarget(f"Invalid base address: {base!r}", base_url=base)

        suffix = (path or "").strip()
        if "://" in suffix or suffix.startswith("//"):
            raise InvalidTarget(f"Path must be relative: {suffix!r}", path=suffix)

        url = base.rstrip("/")
        if suffix:
            url = f"{url}/{suffix.lstrip('/')}"

        try:
            httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise InvalidTarget(f"Invalid target URL {url!r}: {exc}", url=url) from exc
        return url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    async def _send(
        self,
        url: str,
        params: Mapping[str, str],
        headers: Mapping[str, str] | None,
    ) -> httpx.Response:
        client = self._get_client()
        logger.info(f"API Request: GET {url} params={dict(params)}")

        try:
            with anyio.fail_after(self.timeout):
                response = await client.get(url, params=params, headers=headers)
        except TimeoutError as exc:
            raise NetworkError(f"Request timed out after {self.timeout}s", url=url) from exc
        except httpx.InvalidURL as exc:
            raise InvalidTarget(f"Invalid target URL {url!r}: {exc}", url=url) from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Network error calling {url}: {exc}", url=url) from exc
        except httpx.HTTPError as exc:
            # redirect loops, undecodable bodies
            raise ResponseError(f"Unusable response from {url}: {exc}", url=url) from exc

        if not response.is_success:
            raise HttpError(
                f"Provider responded with HTTP {response.status_code}",
                status=response.status_code,
                url=url,
            )
        return response

    def _log_retry(self, state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        delay = state.next_action.sleep if state.next_action else 0.0
        url = error.details.get("url", self.base_url) if isinstance(error, CaseLawError) else self.base_url
        logger.warning(
            f"Retrying {url} in {delay:.2f}s "
            f"(attempt {state.attempt_number}/{self.retry_policy.max_retries}): {error}"
        )

    async def fetch(
        self,
        path: str = "",
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> FetchResult:
        """GET ``path`` with ``params``, served from cache when fresh"""
        url = self.resolve(path)
        query = {str(k): str(v) for k, v in (params or {}).items()}

        cached = await self.cache.get_request(path, query)
        if cached is not None:
            logger.debug(f"Cache hit for {url} params={query}")
            return FetchResult(payload=cached.data, url=url, from_cache=True, etag=cached.etag)

        response: httpx.Response | None = None
        async for attempt in self.retry_policy.retrying(sleep=self._sleep, before_sleep=self._log_retry):
            with attempt:
                response = await self._send(url, query, headers)

        etag = response.headers.get("etag")
        await self.cache.set_request(path, query, response.text, etag=etag)
        return FetchResult(
            payload=response.text,
            url=url,
            from_cache=False,
            etag=etag,
            status_code=response.status_code,
        )

    async def fetch_and_decode(
        self,
        path: str = "",
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Node:
        result = await self.fetch(path, params, headers)
        return decode(result.payload)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
