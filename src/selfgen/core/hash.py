"""Fast hashing for cache keys.

xxhash64 for fragment cache keys, SHA256 when a stable cross-language digest is needed.
"""

from typing import Protocol
from enum import Enum
import hashlib

import xxhash


class Algorithm(str, Enum):
    """Supported hash algorithms."""

    XXHASH64 = "xxhash64"  # Fast, non-cryptographic (cache keys)
    SHA256 = "sha256"      # Stable, shareable with external stores


class Hasher(Protocol):
    """Protocol for hash implementations."""

    def digest(self, data: bytes) -> str:
        """Compute hex digest of data."""
        ...


class XXHasher:
    """Non-cryptographic hasher."""

    def digest(self, data: bytes) -> str:
        return xxhash.xxh64(data).hexdigest()


class SHA256Hasher:
    """Cryptographic hasher."""

    def digest(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()


def create_hasher(algorithm: Algorithm = Algorithm.XXHASH64) -> Hasher:
    """
    Create hasher instance.

    Raises:
        ValueError: If the algorithm is not supported
    """
    if algorithm == Algorithm.XXHASH64:
        return XXHasher()
    elif algorithm == Algorithm.SHA256:
        return SHA256Hasher()
    else:
        raise ValueError(f"Unknown algorithm: {algorithm}")


def hash_string(
    text: str,
    algorithm: Algorithm = Algorithm.XXHASH64,
    truncate: int | None = None
) -> str:
    """
    Hash string to hex digest.

    Args:
        text: String to hash
        algorithm: Hash algorithm (default: xxhash64)
        truncate: Optional length to truncate digest

    Examples:
        >>> len(hash_string("btn-1"))
        16
    """
    digest = create_hasher(algorithm).digest(text.encode("utf-8"))
    return digest[:truncate] if truncate else digest


def hash_fields(*fields: str, algorithm: Algorithm = Algorithm.XXHASH64) -> str:
    """
    Hash multiple fields together (deterministic, order-sensitive).

    Fields are joined with a null byte so ("ab", "c") and ("a", "bc") differ.

    Examples:
        >>> hash_fields("btn-1", "interaction", "") == hash_fields("btn-1", "interaction", "")
        True
    """
    combined = "\x00".join(fields)
    return hash_string(combined, algorithm)


__all__ = [
    "Algorithm",
    "Hasher",
    "create_hasher",
    "hash_string",
    "hash_fields",
]
