"""In-flight generation coalescing keyed by cache key."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from ..core.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class InflightRequests(Generic[T]):
    """
    Share one pending generation between concurrent triggers with the same key.

    The first caller for a key runs the factory; callers arriving before it
    finishes await the same future. The entry is dropped once the call
    settles, so later triggers start fresh (and normally hit the cache).
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future[T]] = {}

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> tuple[T, bool]:
        """
        Run ``factory`` unless a call for ``key`` is already in flight.

        Returns:
            (result, joined) where joined is True for callers that reused
            another caller's in-flight result

        Raises:
            Whatever the shared call raised, for every waiting caller
        """
        existing = self._pending.get(key)
        if existing is not None:
            logger.debug("inflight_joined", key=key)
            return await asyncio.shield(existing), True

        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._pending[key] = future
        try:
            result = await factory()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so an unobserved failure is not reported as unhandled
            future.exception()
            raise
        else:
            future.set_result(result)
            return result, False
        finally:
            self._pending.pop(key, None)


__all__ = ["InflightRequests"]
