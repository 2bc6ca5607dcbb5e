"""Generic LRU cache with statistics.

Bounded in-memory map used as the optional eviction policy behind the
fragment cache. Keys are stored verbatim; callers pass already-derived keys.
"""

from typing import Generic, TypeVar, Any
from collections import OrderedDict
from dataclasses import dataclass

T = TypeVar("T")


@dataclass
class Stats:
    """Cache statistics."""

    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate (0.0 to 1.0)."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Export as dictionary."""
        return {
            "size": self.size,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hit_rate,
        }


class LRUCache(Generic[T]):
    """
    LRU cache with statistics tracking.

    Examples:
        >>> cache = LRUCache[str](max_size=2)
        >>> cache.set("a", "1")
        >>> cache.get("a")
        '1'
        >>> cache.stats.hit_rate
        1.0
    """

    def __init__(self, max_size: int = 100):
        """
        Initialize LRU cache.

        Args:
            max_size: Maximum number of entries before the least recently used is evicted
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.max_size = max_size
        self._cache: OrderedDict[str, T] = OrderedDict()
        self._stats = Stats(max_size=max_size)

    def get(self, key: str) -> T | None:
        """Get cached value, marking it most recently used."""
        if key in self._cache:
            self._cache.move_to_end(key)
            self._stats.hits += 1
            return self._cache[key]

        self._stats.misses += 1
        return None

    def set(self, key: str, value: T) -> None:
        """Store value, replacing any previous value under the same key."""
        if key in self._cache:
            del self._cache[key]

        self._cache[key] = value

        if len(self._cache) > self.max_size:
            self._cache.popitem(last=False)
            self._stats.evictions += 1

        self._stats.size = len(self._cache)

    def delete(self, key: str) -> bool:
        """Delete entry. Returns False if the key was not cached."""
        if key in self._cache:
            del self._cache[key]
            self._stats.size = len(self._cache)
            return True
        return False

    def clear(self) -> None:
        """Clear entire cache."""
        self._cache.clear()
        self._stats.size = 0

    @property
    def stats(self) -> Stats:
        """Get cache statistics."""
        return self._stats

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        """Check if key exists (doesn't update LRU order)."""
        return key in self._cache


__all__ = ["LRUCache", "Stats"]
