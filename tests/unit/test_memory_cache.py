"""Unit tests for the in-process cache adapters."""

import pytest

from chat_resume.adapters.outbound.cache.memory_cache import InMemoryTTLCache, NullCache

pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def test_value_expires_after_ttl(clock):
    cache = InMemoryTTLCache(clock=clock)
    cache.set("k", ["a"], ttl_seconds=300)

    clock.now += 299
    assert cache.get("k") == ["a"]

    clock.now += 1
    assert cache.get("k") is None
    assert len(cache) == 0


def test_oldest_entry_is_evicted_at_capacity(clock):
    cache = InMemoryTTLCache(max_entries=2, clock=clock)
    cache.set("first", 1, ttl_seconds=10)
    clock.now += 1
    cache.set("second", 2, ttl_seconds=10)
    clock.now += 1
    cache.set("third", 3, ttl_seconds=10)

    assert cache.get("first") is None
    assert cache.get("second") == 2
    assert cache.get("third") == 3


def test_overwriting_a_key_does_not_evict(clock):
    cache = InMemoryTTLCache(max_entries=1, clock=clock)
    cache.set("k", 1, ttl_seconds=10)
    cache.set("k", 2, ttl_seconds=10)

    assert cache.get("k") == 2


def test_non_positive_ttl_is_not_stored(clock):
    cache = InMemoryTTLCache(clock=clock)
    cache.set("k", 1, ttl_seconds=0)

    assert cache.get("k") is None


def test_delete_and_clear(clock):
    cache = InMemoryTTLCache(clock=clock)
    cache.set("a", 1, ttl_seconds=10)
    cache.set("b", 2, ttl_seconds=10)

    cache.delete("a")
    cache.delete("missing")
    assert cache.get("a") is None
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0


def test_null_cache_stores_nothing():
    cache = NullCache()
    cache.set("k", 1, ttl_seconds=10)

    assert cache.get("k") is None
