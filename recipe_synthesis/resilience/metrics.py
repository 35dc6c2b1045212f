"""
Resilience Metrics

Prometheus metrics for the synthesis pipeline: provider attempts, breaker
trips, quota rejections, degraded cache operations and final outcomes.
"""

from prometheus_client import Counter

# =============================================================================
# Constants
# =============================================================================

METRIC_PROVIDER_ATTEMPTS = "recipe_synthesis_provider_attempts_total"
METRIC_BREAKER_TRIPS = "recipe_synthesis_breaker_trips_total"
METRIC_QUOTA_REJECTIONS = "recipe_synthesis_quota_rejections_total"
METRIC_CACHE_DEGRADED = "recipe_synthesis_cache_degraded_total"
METRIC_SYNTHESIS_RESULTS = "recipe_synthesis_results_total"


# =============================================================================
# Provider Attempts
# =============================================================================

PROVIDER_ATTEMPTS = Counter(
    name=METRIC_PROVIDER_ATTEMPTS,
    documentation="Provider attempts by outcome (success or failure reason)",
    labelnames=["provider", "outcome"],
)


def record_provider_attempt(provider: str, outcome: str) -> None:
    """
    Record one provider attempt.

    Args:
        provider: Provider identifier
        outcome: "success", "transient", "quota_exceeded" or "malformed"
    """
    PROVIDER_ATTEMPTS.labels(provider=provider, outcome=outcome).inc()


# =============================================================================
# Breakers and Quota
# =============================================================================

BREAKER_TRIPS = Counter(
    name=METRIC_BREAKER_TRIPS,
    documentation="Number of times a provider breaker flag was written",
    labelnames=["provider"],
)

QUOTA_REJECTIONS = Counter(
    name=METRIC_QUOTA_REJECTIONS,
    documentation="Requests that skipped the primary provider due to the daily ceiling",
)


def record_breaker_trip(provider: str) -> None:
    """Record a breaker trip for ``provider``."""
    BREAKER_TRIPS.labels(provider=provider).inc()


def record_quota_rejection() -> None:
    """Record a request refused by the daily primary-provider ceiling."""
    QUOTA_REJECTIONS.inc()


# =============================================================================
# Cache
# =============================================================================

CACHE_DEGRADED = Counter(
    name=METRIC_CACHE_DEGRADED,
    documentation="Cache operations that degraded to miss/no-op",
    labelnames=["operation"],
)


def record_cache_degraded(operation: str) -> None:
    """Record a degraded cache operation (get, set, delete, ping)."""
    CACHE_DEGRADED.labels(operation=operation).inc()


# =============================================================================
# Outcomes
# =============================================================================

SYNTHESIS_RESULTS = Counter(
    name=METRIC_SYNTHESIS_RESULTS,
    documentation="Synthesis results by provenance",
    labelnames=["provenance"],
)


def record_synthesis_result(provenance: str) -> None:
    """Record a completed synthesis tagged with its provenance."""
    SYNTHESIS_RESULTS.labels(provenance=provenance).inc()
