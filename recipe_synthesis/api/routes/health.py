"""
Health Router

Liveness, readiness and the Prometheus scrape endpoint.

Readiness reports the cache as a check but never fails on it: the synthesis
pipeline treats an unavailable cache as an empty one, so the service can
still answer requests.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel

from recipe_synthesis.api.deps import get_cache
from recipe_synthesis.observability.metrics import METRICS_CONTENT_TYPE, generate_metrics
from recipe_synthesis.services.cache import TimedCache

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    checks: dict[str, bool]
    errors: dict[str, str] = {}


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=APP_VERSION)


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(cache: TimedCache = Depends(get_cache)) -> ReadinessResponse:
    """
    Readiness check.

    Returns:
        "ready" when the cache answers PING within the liveness timeout,
        otherwise "degraded" (still HTTP 200)
    """
    health = await cache.check_health()
    checks = {"cache": health.ping_success}
    errors = {"cache": health.error} if health.error else {}
    return ReadinessResponse(
        status="ready" if health.ping_success else "degraded",
        checks=checks,
        errors=errors,
    )


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus text exposition."""
    return Response(content=generate_metrics(), media_type=METRICS_CONTENT_TYPE)
