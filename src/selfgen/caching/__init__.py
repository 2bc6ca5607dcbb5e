"""Content-addressable generation cache."""

from .keys import derive_key, normalize_input, KEY_PREFIX
from .store import CacheEntry, KeyValueStore, MemoryStore, LRUStore, GenerationCache
from .inflight import InflightRequests

__all__ = [
    "derive_key",
    "normalize_input",
    "KEY_PREFIX",
    "CacheEntry",
    "KeyValueStore",
    "MemoryStore",
    "LRUStore",
    "GenerationCache",
    "InflightRequests",
]
