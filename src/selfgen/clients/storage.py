"""Key-Value Storage Client"""

import asyncio
from typing import Any
from urllib.parse import quote

import httpx
import pybreaker

from ..core.errors import TransportError
from ..core.logging_config import get_logger

logger = get_logger(__name__)


class HttpKeyValueStore:
    """
    Key-value store served over HTTP, with circuit breaker protection.

    ``GET {base}/kv/{key}`` answers 200 with ``{"value": ...}`` or 404;
    ``PUT {base}/kv/{key}`` takes ``{"value": ...}``.
    """

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 5.0) -> None:
        """
        Initialize storage client with circuit breaker.

        Args:
            base_url: Base URL of the storage service
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout)

        # Create listener for state change logging
        class BreakerListener(pybreaker.CircuitBreakerListener):
            """Listener for circuit breaker state changes."""

            def state_change(self, cb, old_state, new_state):
                """Called when circuit breaker state changes."""
                logger.warning(
                    "breaker_state_change",
                    breaker=cb.name,
                    from_state=str(old_state),
                    to_state=str(new_state),
                )

        self._breaker = pybreaker.CircuitBreaker(
            fail_max=5,
            reset_timeout=30,
            name="storage-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", url=self.base_url)

    def _url(self, key: str) -> str:
        return f"{self.base_url}/kv/{quote(key, safe='')}"

    def get_sync(self, key: str) -> Any | None:
        """
        Fetch a value.

        Raises:
            TransportError: If the service is unreachable or answers with an error
        """
        try:
            response = self._breaker.call(self._client.get, self._url(key))
            if response.status_code == 404:
                return None
            response.raise_for_status()
            data = response.json()
        except pybreaker.CircuitBreakerError as e:
            logger.error("storage_get_failed", key=key, error="Circuit breaker open - storage unavailable")
            raise TransportError("Storage circuit breaker open", e) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("storage_get_failed", key=key, error=str(e))
            raise TransportError(f"Storage read failed: {e}", e) from e

        if not isinstance(data, dict):
            logger.error("invalid_response", type=type(data).__name__)
            raise TransportError("Storage returned an unexpected payload")
        return data.get("value")

    def put_sync(self, key: str, value: Any) -> None:
        """
        Store a value.

        Raises:
            TransportError: If the write did not succeed
        """
        try:
            response = self._breaker.call(self._client.put, self._url(key), json={"value": value})
            response.raise_for_status()
        except pybreaker.CircuitBreakerError as e:
            logger.error("storage_put_failed", key=key, error="Circuit breaker open - storage unavailable")
            raise TransportError("Storage circuit breaker open", e) from e
        except httpx.HTTPError as e:
            logger.warning("storage_put_failed", key=key, error=str(e))
            raise TransportError(f"Storage write failed: {e}", e) from e

    async def get(self, key: str) -> Any | None:
        """Async fetch (runs the sync client in the thread pool)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.get_sync, key)

    async def put(self, key: str, value: Any) -> None:
        """Async store (runs the sync client in the thread pool)."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.put_sync, key, value)

    def health_check(self) -> bool:
        """
        Check if storage is reachable (bypasses circuit breaker).

        Returns:
            True if storage is healthy
        """
        try:
            response = self._client.get(f"{self.base_url}/health", timeout=2.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def close(self) -> None:
        self._client.close()
