"""
Quota Governor

Owns two independent cost controls:

- A process-lifetime daily counter for generative (primary) provider calls.
  The counter is advisory: it fails open by routing requests to other
  providers, never by rejecting them. It is reset the first time a call
  observes a new calendar day; a process restart also resets it.
- Cache-backed breaker flags, one per downstream provider, written when that
  provider reports quota exhaustion and expiring through the cache TTL.

Both tolerate lost updates under concurrent access: an extra counted call or
a redundantly tripped breaker only moves a gate slightly early or late.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from pydantic import BaseModel

from recipe_synthesis.resilience.metrics import record_breaker_trip, record_quota_rejection
from recipe_synthesis.services.cache import TimedCache

logger = logging.getLogger(__name__)


DEFAULT_MAX_DAILY_PRIMARY_CALLS = 50
DEFAULT_BREAKER_TTL_SECONDS = 6 * 60 * 60

BREAKER_KEY_SUFFIX = "_quota_exceeded"
BREAKER_FLAG_VALUE = "true"


def breaker_key(provider_id: str) -> str:
    """Cache key of the breaker flag for ``provider_id``."""
    return f"{provider_id}{BREAKER_KEY_SUFFIX}"


@dataclass
class QuotaState:
    """Day-bucketed call counter."""

    count: int
    window_start: date


class QuotaSnapshot(BaseModel):
    """Read-only view of the quota window for operators."""

    count: int
    limit: int
    window_start: date
    limited: bool

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)


class QuotaGovernor:
    """
    Daily ceiling for primary-provider calls plus per-provider breakers.

    Constructed once per process and injected into the orchestrator.

    Attributes:
        cache: TimedCache holding breaker flags
        max_daily_calls: Daily ceiling for primary-provider calls
        limit_enabled: When False the ceiling is not enforced (calls are
            still counted)
        default_breaker_ttl_seconds: TTL used by trip_breaker() when none is given
    """

    def __init__(
        self,
        cache: TimedCache,
        max_daily_calls: int = DEFAULT_MAX_DAILY_PRIMARY_CALLS,
        limit_enabled: bool = True,
        default_breaker_ttl_seconds: int = DEFAULT_BREAKER_TTL_SECONDS,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        """
        Initialize QuotaGovernor.

        Args:
            cache: Cache used for breaker flags
            max_daily_calls: Daily ceiling for primary calls
            limit_enabled: Whether the ceiling is enforced
            default_breaker_ttl_seconds: Default breaker TTL
            today: Clock returning the current calendar day (injectable for tests)
        """
        self._cache = cache
        self._max_daily_calls = max_daily_calls
        self._limit_enabled = limit_enabled
        self._default_breaker_ttl = default_breaker_ttl_seconds
        self._today = today or date.today
        self._state = QuotaState(count=0, window_start=self._today())

    @property
    def max_daily_calls(self) -> int:
        return self._max_daily_calls

    @property
    def default_breaker_ttl_seconds(self) -> int:
        return self._default_breaker_ttl

    # =========================================================================
    # Daily counter
    # =========================================================================

    def _roll_window(self) -> None:
        today = self._today()
        if today != self._state.window_start:
            logger.info(
                f"Primary call counter reset for new day "
                f"(previous window {self._state.window_start}: {self._state.count} calls)"
            )
            self._state = QuotaState(count=0, window_start=today)

    def try_consume_primary_quota(self) -> bool:
        """
        Reserve one primary-provider call for today.

        Returns:
            False, without side effects, when today's ceiling is reached;
            otherwise increments the counter and returns True
        """
        self._roll_window()

        if self._limit_enabled and self._state.count >= self._max_daily_calls:
            logger.info(
                f"Primary call limit reached ({self._state.count}/{self._max_daily_calls})"
            )
            record_quota_rejection()
            return False

        self._state.count += 1
        logger.debug(f"Primary call count: {self._state.count}/{self._max_daily_calls}")
        return True

    def snapshot(self) -> QuotaSnapshot:
        """Current window, after applying any pending day rollover."""
        self._roll_window()
        return QuotaSnapshot(
            count=self._state.count,
            limit=self._max_daily_calls,
            window_start=self._state.window_start,
            limited=self._limit_enabled,
        )

    # =========================================================================
    # Breakers
    # =========================================================================

    async def is_breaker_open(self, provider_id: str) -> bool:
        """
        Whether ``provider_id`` is currently disabled.

        A cache miss, including a degraded cache, means closed.
        """
        value = await self._cache.get(breaker_key(provider_id))
        if value is None:
            return False
        return str(value).lower() == BREAKER_FLAG_VALUE

    async def trip_breaker(self, provider_id: str, ttl_seconds: Optional[int] = None) -> bool:
        """
        Disable ``provider_id`` for ``ttl_seconds``.

        Returns:
            True when the flag was stored, False if the cache degraded
        """
        ttl = ttl_seconds or self._default_breaker_ttl
        record_breaker_trip(provider_id)
        stored = await self._cache.set(breaker_key(provider_id), BREAKER_FLAG_VALUE, ttl_seconds=ttl)
        logger.warning(
            f"Breaker tripped for {provider_id} (ttl={ttl}s, stored={stored})"
        )
        return stored

    async def reset_breaker(self, provider_id: str) -> bool:
        """
        Operator action: re-enable ``provider_id`` before its TTL expires.

        Returns:
            True when the delete was acknowledged, False if the cache degraded
        """
        cleared = await self._cache.delete(breaker_key(provider_id))
        logger.info(f"Breaker reset for {provider_id} (acknowledged={cleared})")
        return cleared
