"""
Timed Cache Service

Redis-backed key/value cache whose every operation is raced against a
timeout and degrades instead of raising.

Degradation rules:
- get() returns None (a miss) when the backend is missing, not ready,
  slow, or failing.
- set()/delete() return False (degraded) in the same situations.

Callers can therefore treat "cache unavailable" exactly like "cache empty".

Pattern: Repository pattern with Redis storage
"""

import json
import logging
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel
from redis.asyncio import Redis

from recipe_synthesis.core.exceptions import CacheDegradedError
from recipe_synthesis.resilience.metrics import record_cache_degraded
from recipe_synthesis.resilience.timeouts import OperationTimeoutError, run_with_timeout

logger = logging.getLogger(__name__)


# =============================================================================
# Default Configuration
# =============================================================================

DEFAULT_OPERATION_TIMEOUT_SECONDS = 3.0
DEFAULT_LIVENESS_TIMEOUT_SECONDS = 2.0


class CacheHealth(BaseModel):
    """Result of a cache liveness check."""

    is_configured: bool
    ping_success: bool
    error: Optional[str] = None


# =============================================================================
# TimedCache
# =============================================================================


class TimedCache:
    """
    Cache with per-call timeouts and graceful degradation.

    Attributes:
        redis: Redis client, or None when no backend is configured
        operation_timeout_seconds: Default timeout for get/set/delete
        liveness_timeout_seconds: Timeout for check_health()
    """

    def __init__(
        self,
        redis_client: Optional[Redis],
        operation_timeout_seconds: float = DEFAULT_OPERATION_TIMEOUT_SECONDS,
        liveness_timeout_seconds: float = DEFAULT_LIVENESS_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize TimedCache.

        Args:
            redis_client: Redis client (None disables the backend; every
                operation then degrades)
            operation_timeout_seconds: Default timeout for get/set/delete
            liveness_timeout_seconds: Timeout for liveness checks
        """
        self._redis = redis_client
        self._operation_timeout = operation_timeout_seconds
        self._liveness_timeout = liveness_timeout_seconds

    @property
    def is_configured(self) -> bool:
        """Whether a backend client was supplied."""
        return self._redis is not None

    # =========================================================================
    # Public API
    # =========================================================================

    async def get(self, key: str, timeout: Optional[float] = None) -> Optional[Any]:
        """
        Read a value.

        Values that look like JSON objects or arrays are decoded; if decoding
        fails the raw string is returned.

        Args:
            key: Cache key
            timeout: Override for the operation timeout

        Returns:
            The stored value, or None on miss or degradation
        """
        try:
            raw = await self._execute("get", key, lambda r: r.get(key), timeout)
        except CacheDegradedError as e:
            self._log_degraded(e)
            return None

        if raw is None:
            return None
        return self._decode(key, raw)

    async def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Write a value, optionally with a TTL.

        Pydantic models, dicts and lists are stored as JSON strings.

        Returns:
            True when the backend acknowledged the write, False when degraded
        """
        payload = self._encode(value)
        try:
            result = await self._execute(
                "set",
                key,
                lambda r: r.set(key, payload, ex=ttl_seconds),
                timeout,
            )
        except CacheDegradedError as e:
            self._log_degraded(e)
            return False
        return bool(result)

    async def delete(self, key: str, timeout: Optional[float] = None) -> bool:
        """
        Delete a key.

        Returns:
            True when the backend acknowledged the delete (whether or not the
            key existed), False when degraded
        """
        try:
            await self._execute("delete", key, lambda r: r.delete(key), timeout)
        except CacheDegradedError as e:
            self._log_degraded(e)
            return False
        return True

    async def check_health(self) -> CacheHealth:
        """
        PING the backend within the liveness timeout.

        Returns:
            CacheHealth describing configuration and ping outcome
        """
        if self._redis is None:
            return CacheHealth(
                is_configured=False,
                ping_success=False,
                error="Cache backend not configured",
            )
        try:
            pong = await self._execute(
                "ping", None, lambda r: r.ping(), self._liveness_timeout
            )
        except CacheDegradedError as e:
            self._log_degraded(e)
            return CacheHealth(is_configured=True, ping_success=False, error=e.message)
        return CacheHealth(is_configured=True, ping_success=bool(pong))

    # =========================================================================
    # Internals
    # =========================================================================

    async def _execute(
        self,
        operation: str,
        key: Optional[str],
        call: Callable[[Redis], Awaitable[Any]],
        timeout: Optional[float],
    ) -> Any:
        if self._redis is None:
            raise CacheDegradedError(
                "Cache backend not configured", operation=operation, key=key
            )

        try:
            return await run_with_timeout(
                call(self._redis),
                timeout if timeout is not None else self._operation_timeout,
                operation=f"cache {operation}",
            )
        except OperationTimeoutError as e:
            raise CacheDegradedError(str(e), operation=operation, key=key) from e
        except Exception as e:
            raise CacheDegradedError(
                f"Cache backend error: {type(e).__name__}: {e}",
                operation=operation,
                key=key,
            ) from e

    def _decode(self, key: str, raw: Any) -> Any:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        if isinstance(raw, str) and raw.startswith(("{", "[")):
            try:
                return json.loads(raw)
            except json.JSONDecodeError as e:
                logger.warning(f"Cached value for {key} is not valid JSON: {e}")
        return raw

    @staticmethod
    def _encode(value: Any) -> str:
        if isinstance(value, BaseModel):
            return value.model_dump_json()
        if isinstance(value, str):
            return value
        return json.dumps(value)

    @staticmethod
    def _log_degraded(error: CacheDegradedError) -> None:
        record_cache_degraded(error.operation)
        logger.warning(
            f"Cache {error.operation} degraded for key={error.key}: {error.message}"
        )
