"""
Fallback Orchestrator

Runs one synthesis request through the fallback chain:

    CACHE_CHECK -> QUOTA_CHECK -> PRIMARY_ATTEMPT(1..n) -> SECONDARY_ATTEMPT(1..m)
                -> EMERGENCY -> DONE

- CACHE_CHECK: a hit finishes immediately with provenance CACHE.
- QUOTA_CHECK: the primary provider is skipped when it is unconfigured, its
  breaker is open, or the daily ceiling refuses the call. The daily counter
  is only consumed once the first two checks pass.
- PRIMARY/SECONDARY_ATTEMPT: each attempt is raced against the provider's
  timeout. QUOTA_EXCEEDED trips that provider's breaker and abandons it for
  this request; TRANSIENT moves to the next attempt strategy; MALFORMED does
  too, but a second malformed answer abandons the provider.
  Unexpected exceptions count as TRANSIENT.
- A provider success is written through to the cache.
- EMERGENCY always succeeds and is never cached.

Nothing raised by the cache or a provider escapes run(). The only error a
caller can see is InvalidRequestError, raised by synthesize() before the
chain starts.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from pydantic import ValidationError

from recipe_synthesis.core.exceptions import FailureReason, ProviderError
from recipe_synthesis.models.domain import Provenance, SynthesisRequest, SynthesisResult
from recipe_synthesis.observability.logging import get_logger
from recipe_synthesis.providers.base import RecipeProvider
from recipe_synthesis.resilience.emergency import synthesize_emergency_recipe
from recipe_synthesis.resilience.metrics import record_provider_attempt, record_synthesis_result
from recipe_synthesis.resilience.timeouts import OperationTimeoutError, run_with_timeout
from recipe_synthesis.services.cache import TimedCache
from recipe_synthesis.services.quota import QuotaGovernor

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_RECIPE_CACHE_TTL_SECONDS = 24 * 60 * 60

OUTCOME_SUCCESS = "success"
OUTCOME_SKIPPED = "skipped"

# A malformed answer is retried once with the next strategy, then the provider is abandoned.
MAX_MALFORMED_RETRIES = 1


class SynthesisStage(str, Enum):
    """States of the fallback chain."""

    CACHE_CHECK = "CACHE_CHECK"
    QUOTA_CHECK = "QUOTA_CHECK"
    PRIMARY_ATTEMPT = "PRIMARY_ATTEMPT"
    SECONDARY_ATTEMPT = "SECONDARY_ATTEMPT"
    EMERGENCY = "EMERGENCY"
    DONE = "DONE"


# =============================================================================
# FallbackOrchestrator
# =============================================================================


class FallbackOrchestrator:
    """
    Cache, quota gate, ordered provider attempts, emergency fallback.

    Example:
        >>> orchestrator = FallbackOrchestrator(cache, quota, gemini, spoonacular)
        >>> result = await orchestrator.synthesize(ingredients=["eggs", "spinach"])
        >>> result.provenance
        <Provenance.PRIMARY_PROVIDER: 'PRIMARY_PROVIDER'>

    Attributes:
        cache: TimedCache for recipe results
        quota: QuotaGovernor shared by all requests in the process
        primary: Generative provider (may be None)
        secondary: Database provider (may be None)
    """

    def __init__(
        self,
        cache: TimedCache,
        quota: QuotaGovernor,
        primary: Optional[RecipeProvider] = None,
        secondary: Optional[RecipeProvider] = None,
        recipe_cache_ttl_seconds: int = DEFAULT_RECIPE_CACHE_TTL_SECONDS,
        breaker_ttl_seconds: Optional[int] = None,
        enable_caching: bool = True,
    ) -> None:
        """
        Initialize FallbackOrchestrator.

        Args:
            cache: Cache for recipe results
            quota: Daily counter and breaker flags
            primary: Primary provider, gated by the daily ceiling
            secondary: Secondary provider
            recipe_cache_ttl_seconds: TTL of write-through entries
            breaker_ttl_seconds: Breaker TTL (default: the governor's)
            enable_caching: When False the cache is neither read nor written
        """
        self._cache = cache
        self._quota = quota
        self._primary = primary
        self._secondary = secondary
        self._recipe_cache_ttl = recipe_cache_ttl_seconds
        self._breaker_ttl = breaker_ttl_seconds
        self._enable_caching = enable_caching
        self._log = get_logger(__name__)

    # =========================================================================
    # Entry points
    # =========================================================================

    async def synthesize(
        self,
        ingredients: Optional[Iterable[str]] = None,
        dish_name: Optional[str] = None,
    ) -> SynthesisResult:
        """
        Validate the inputs and produce a recipe.

        Args:
            ingredients: Ingredient names, any order, duplicates allowed
            dish_name: Optional dish name

        Returns:
            SynthesisResult tagged with its provenance

        Raises:
            InvalidRequestError: If neither input carries content
        """
        request = SynthesisRequest(
            ingredients=tuple(ingredients or ()),
            dish_name=dish_name,
        )
        return await self.run(request)

    async def run(self, request: SynthesisRequest) -> SynthesisResult:
        """Run a validated request through the chain. Never raises."""
        log = self._log.bind(cache_key=request.cache_key)

        log.debug("stage", stage=SynthesisStage.CACHE_CHECK.value)
        cached = await self._check_cache(request)
        if cached is not None:
            return self._done(log, cached)

        log.debug("stage", stage=SynthesisStage.QUOTA_CHECK.value)
        result = await self._try_primary(request, log)

        if result is None:
            log.debug("stage", stage=SynthesisStage.SECONDARY_ATTEMPT.value)
            result = await self._try_secondary(request, log)

        if result is None:
            log.info("stage", stage=SynthesisStage.EMERGENCY.value)
            return self._done(log, synthesize_emergency_recipe(request))

        await self._write_through(request, result)
        return self._done(log, result)

    def _done(self, log, result: SynthesisResult) -> SynthesisResult:
        record_synthesis_result(result.provenance.value)
        log.info(
            "synthesis_completed",
            stage=SynthesisStage.DONE.value,
            provenance=result.provenance.value,
            origin=result.origin,
        )
        return result

    # =========================================================================
    # Cache
    # =========================================================================

    async def _check_cache(self, request: SynthesisRequest) -> Optional[SynthesisResult]:
        if not self._enable_caching:
            return None

        cached = await self._cache.get(request.cache_key)
        if cached is None:
            return None
        if not isinstance(cached, dict):
            logger.warning(f"Ignoring non-object cache entry for {request.cache_key}")
            return None

        try:
            result = SynthesisResult.model_validate(cached)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid cache entry for {request.cache_key}: {e}")
            return None
        return result.with_provenance(Provenance.CACHE)

    async def _write_through(self, request: SynthesisRequest, result: SynthesisResult) -> None:
        if not self._enable_caching:
            return
        stored = await self._cache.set(
            request.cache_key, result, ttl_seconds=self._recipe_cache_ttl
        )
        if not stored:
            logger.info(f"Write-through skipped for {request.cache_key} (cache degraded)")

    # =========================================================================
    # Providers
    # =========================================================================

    async def _try_primary(self, request: SynthesisRequest, log) -> Optional[SynthesisResult]:
        provider = self._primary
        if provider is None or not provider.is_configured:
            log.info("provider_skipped", provider=getattr(provider, "provider_id", None), why="unconfigured")
            return None

        if await self._quota.is_breaker_open(provider.provider_id):
            log.info("provider_skipped", provider=provider.provider_id, why="breaker_open")
            record_provider_attempt(provider.provider_id, OUTCOME_SKIPPED)
            return None

        if not self._quota.try_consume_primary_quota():
            log.info("provider_skipped", provider=provider.provider_id, why="daily_limit")
            record_provider_attempt(provider.provider_id, OUTCOME_SKIPPED)
            return None

        log.debug("stage", stage=SynthesisStage.PRIMARY_ATTEMPT.value)
        return await self._attempt_provider(
            provider, request, Provenance.PRIMARY_PROVIDER, log
        )

    async def _try_secondary(self, request: SynthesisRequest, log) -> Optional[SynthesisResult]:
        provider = self._secondary
        if provider is None or not provider.is_configured:
            log.info("provider_skipped", provider=getattr(provider, "provider_id", None), why="unconfigured")
            return None

        if await self._quota.is_breaker_open(provider.provider_id):
            log.info("provider_skipped", provider=provider.provider_id, why="breaker_open")
            record_provider_attempt(provider.provider_id, OUTCOME_SKIPPED)
            return None

        return await self._attempt_provider(
            provider, request, Provenance.SECONDARY_PROVIDER, log
        )

    async def _attempt_provider(
        self,
        provider: RecipeProvider,
        request: SynthesisRequest,
        provenance: Provenance,
        log,
    ) -> Optional[SynthesisResult]:
        """
        Up to ``provider.max_attempts`` attempts.

        Returns:
            The first successful result, or None when the provider is
            exhausted or reported quota exhaustion
        """
        pid = provider.provider_id
        malformed = 0

        for attempt_number in range(1, provider.max_attempts + 1):
            try:
                result = await run_with_timeout(
                    provider.attempt(request, attempt_number),
                    provider.timeout_seconds,
                    operation=f"{pid} attempt {attempt_number}",
                )
            except ProviderError as e:
                reason = e.reason
                detail = e.message
            except OperationTimeoutError as e:
                reason = FailureReason.TRANSIENT
                detail = str(e)
            except Exception as e:
                logger.exception(f"Unexpected error from {pid} attempt {attempt_number}")
                reason = FailureReason.TRANSIENT
                detail = f"{type(e).__name__}: {e}"
            else:
                record_provider_attempt(pid, OUTCOME_SUCCESS)
                log.info("provider_succeeded", provider=pid, attempt=attempt_number)
                return result.with_provenance(provenance)

            record_provider_attempt(pid, reason.value)
            log.warning(
                "provider_failed",
                provider=pid,
                attempt=attempt_number,
                reason=reason.value,
                detail=detail,
            )

            if reason == FailureReason.QUOTA_EXCEEDED:
                await self._quota.trip_breaker(pid, self._breaker_ttl)
                return None

            if reason == FailureReason.MALFORMED:
                malformed += 1
                if malformed > MAX_MALFORMED_RETRIES:
                    log.info("provider_escalated", provider=pid, reason=reason.value)
                    return None

        log.info("provider_exhausted", provider=pid, attempts=provider.max_attempts)
        return None
