"""Core Package for the Dutch Legal MCP service

Resilient retrieval layer: transport client, response cache, retry policy,
markup decoder and the client registry.
"""

from .cache import Cache, CacheConfig, CacheEntry, request_signature
from .errors import (
    CaseLawError,
    HttpError,
    InvalidTarget,
    MappingError,
    NetworkError,
    ParseError,
    ResponseError,
    ValidationError,
    error_to_message,
)
from .http_client import FetchResult, TransportClient
from .in_memory_cache import InMemoryCache
from .markup import Node, decode
from .registry import ClientRegistry
from .retry import RetryPolicy

__all__ = [
    # Cache
    "Cache",
    "CacheConfig",
    "CacheEntry",
    "InMemoryCache",
    "request_signature",
    # Errors
    "CaseLawError",
    "HttpError",
    "InvalidTarget",
    "MappingError",
    "NetworkError",
    "ParseError",
    "ResponseError",
    "ValidationError",
    "error_to_message",
    # Transport
    "ClientRegistry",
    "FetchResult",
    "RetryPolicy",
    "TransportClient",
    # Markup
    "Node",
    "decode",
]
