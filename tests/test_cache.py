"""Tests for the LRU cache behind the lru store and the repair fix cache."""

import pytest
from hypothesis import given, strategies as st

from selfgen.core.cache import LRUCache


def test_lru_evicts_least_recently_used():
    """Reading a key protects it from the next eviction."""
    cache = LRUCache[str](max_size=2)

    cache.set("fragment:a", "card-a")
    cache.set("fragment:b", "card-b")
    assert cache.get("fragment:a") == "card-a"

    cache.set("fragment:c", "card-c")  # Evicts b

    assert "fragment:b" not in cache
    assert cache.get("fragment:a") == "card-a"
    assert cache.get("fragment:c") == "card-c"
    assert cache.stats.evictions == 1


def test_lru_overwrite_keeps_single_entry():
    cache = LRUCache[str](max_size=10)

    cache.set("fragment:a", "first")
    cache.set("fragment:a", "second")

    assert cache.get("fragment:a") == "second"
    assert len(cache) == 1


def test_lru_delete_and_clear():
    cache = LRUCache[int](max_size=10)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.delete("a") is True
    assert cache.delete("a") is False

    cache.clear()
    assert len(cache) == 0
    assert cache.stats.size == 0


def test_stats_hit_rate():
    cache = LRUCache[str](max_size=10)
    cache.set("key", "value")

    _ = cache.get("key")  # Hit
    _ = cache.get("missing")  # Miss

    stats = cache.stats.to_dict()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 0.5


def test_invalid_max_size():
    with pytest.raises(ValueError):
        LRUCache[str](max_size=0)


@given(st.lists(st.text(min_size=1, max_size=10), min_size=1, max_size=50))
def test_cache_never_exceeds_max_size(keys):
    """Property test: size stays bounded and the newest key is always present."""
    cache = LRUCache[str](max_size=8)

    for key in keys:
        cache.set(key, f"value_{key}")

    assert len(cache) <= 8
    assert cache.get(keys[-1]) == f"value_{keys[-1]}"
