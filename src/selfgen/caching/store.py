"""
Generation Cache
Maps derived keys to previously generated fragments over a pluggable
key-value store.
"""

from datetime import datetime, timezone
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..core.cache import LRUCache, Stats
from ..core.logging_config import get_logger
from ..monitoring import metrics_collector
from ..tree import ComponentNode

logger = get_logger(__name__)


class CacheEntry(BaseModel):
    """A stored generation result."""

    model_config = ConfigDict(frozen=True)

    key: str
    fragment: ComponentNode
    reasoning: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class KeyValueStore(Protocol):
    """Persistent key-value store holding JSON-compatible values."""

    async def get(self, key: str) -> Any | None: ...

    async def put(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """Unbounded in-process store. Never evicts."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    async def get(self, key: str) -> Any | None:
        return self._data.get(key)

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)


class LRUStore:
    """Bounded in-process store evicting the least recently used key."""

    def __init__(self, max_size: int = 1000) -> None:
        self._cache: LRUCache[Any] = LRUCache(max_size=max_size)

    async def get(self, key: str) -> Any | None:
        return self._cache.get(key)

    async def put(self, key: str, value: Any) -> None:
        self._cache.set(key, value)

    @property
    def stats(self) -> Stats:
        return self._cache.stats

    def __len__(self) -> int:
        return len(self._cache)


class GenerationCache:
    """
    Fragment cache over a key-value store.

    Store failures never escape: a failed read is a miss and a failed write
    is logged. A second put for a key overwrites the first.
    """

    def __init__(self, store: KeyValueStore, cache_type: str = "fragment") -> None:
        """
        Initialize cache.

        Args:
            store: Backing key-value store
            cache_type: Label used for hit/miss metrics
        """
        self.store = store
        self.cache_type = cache_type
        self.hits = 0
        self.misses = 0

    async def get(self, key: str) -> CacheEntry | None:
        """Look up a previously stored result."""
        try:
            raw = await self.store.get(key)
        except Exception as e:
            logger.warning("cache_read_failed", key=key, error=str(e))
            metrics_collector.record_error(type(e).__name__, "cache")
            raw = None

        entry = None
        if raw is not None:
            try:
                entry = CacheEntry.model_validate(raw)
            except PydanticValidationError as e:
                logger.warning("cache_entry_invalid", key=key, error=str(e))

        if entry is None:
            self.misses += 1
            metrics_collector.record_cache_miss(self.cache_type)
            logger.debug("cache_miss", key=key)
            return None

        self.hits += 1
        metrics_collector.record_cache_hit(self.cache_type)
        logger.debug("cache_hit", key=key)
        return entry

    async def put(self, key: str, fragment: ComponentNode, reasoning: str = "") -> CacheEntry | None:
        """
        Store a result, overwriting any previous one for the key.

        Returns:
            The stored entry, or None if the store rejected the write
        """
        entry = CacheEntry(key=key, fragment=fragment, reasoning=reasoning)
        try:
            await self.store.put(key, entry.model_dump(mode="json"))
        except Exception as e:
            logger.warning("cache_write_failed", key=key, error=str(e))
            metrics_collector.record_error(type(e).__name__, "cache")
            return None

        logger.debug("cache_put", key=key, fragment_id=fragment.id)
        return entry


__all__ = ["CacheEntry", "KeyValueStore", "MemoryStore", "LRUStore", "GenerationCache"]
