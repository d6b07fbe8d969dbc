import pytest

from dutch_legal_mcp.core.cache import CacheConfig, request_signature
from dutch_legal_mcp.core.in_memory_cache import InMemoryCache


@pytest.fixture()
def cache(clock):
    return InMemoryCache(CacheConfig(ttl=300), clock=clock)


def test_request_signature_ignores_param_order():
    assert request_signature("", {"q": "a", "max": "5"}) == request_signature("", {"max": "5", "q": "a"})
    assert request_signature("", {"q": "a"}) != request_signature("", {"q": "b"})
    assert request_signature("x", None) == request_signature("x", {})


def test_long_keys_are_hashed(cache):
    key = cache._make_key("x" * 400)

    assert len(key) < 100
    assert key.startswith("dutch_legal:")


@pytest.mark.asyncio
async def test_entry_returned_within_ttl(cache, clock):
    await cache.set_request("", {"id": "1"}, "<payload/>", etag='"v1"')
    clock.advance(299)

    entry = await cache.get_request("", {"id": "1"})

    assert entry.data == "<payload/>"
    assert entry.etag == '"v1"'


@pytest.mark.asyncio
async def test_stale_entry_is_evicted_on_lookup(cache, clock):
    await cache.set_request("", {"id": "1"}, "<payload/>")
    clock.advance(301)

    assert len(cache) == 1
    assert await cache.get_request("", {"id": "1"}) is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_set_overwrites_previous_entry(cache, clock):
    await cache.set_request("", {"id": "1"}, "old")
    clock.advance(200)
    await cache.set_request("", {"id": "1"}, "new")
    clock.advance(200)

    entry = await cache.get_request("", {"id": "1"})

    assert entry.data == "new"


@pytest.mark.asyncio
async def test_clear_and_delete(cache):
    await cache.set("a", 1)
    await cache.set("b", 2)
    await cache.delete("a")

    assert await cache.get("a") is None
    assert await cache.clear() == 1
    assert len(cache) == 0
