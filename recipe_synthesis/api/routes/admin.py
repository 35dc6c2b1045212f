"""
Admin Router

Operator actions on the cost controls:

- ``GET /v1/admin/quota``: current daily window of primary-provider calls
- ``GET /v1/admin/breakers/{provider_id}``: whether a provider is disabled
- ``DELETE /v1/admin/breakers/{provider_id}``: re-enable a provider before
  its breaker TTL expires
"""

import logging

from fastapi import APIRouter, Depends

from recipe_synthesis.api.deps import get_quota_governor
from recipe_synthesis.models.responses import BreakerStatusResponse, QuotaSnapshotResponse
from recipe_synthesis.services.quota import QuotaGovernor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin", tags=["Admin"])


@router.get("/quota", response_model=QuotaSnapshotResponse)
async def get_quota(quota: QuotaGovernor = Depends(get_quota_governor)) -> QuotaSnapshotResponse:
    snapshot = quota.snapshot()
    return QuotaSnapshotResponse(
        count=snapshot.count,
        limit=snapshot.limit,
        window_start=snapshot.window_start,
        limited=snapshot.limited,
        remaining=snapshot.remaining,
    )


@router.get("/breakers/{provider_id}", response_model=BreakerStatusResponse)
async def get_breaker(
    provider_id: str,
    quota: QuotaGovernor = Depends(get_quota_governor),
) -> BreakerStatusResponse:
    is_open = await quota.is_breaker_open(provider_id)
    return BreakerStatusResponse(provider_id=provider_id, open=is_open)


@router.delete("/breakers/{provider_id}", response_model=BreakerStatusResponse)
async def reset_breaker(
    provider_id: str,
    quota: QuotaGovernor = Depends(get_quota_governor),
) -> BreakerStatusResponse:
    """
    Clear ``provider_id``'s breaker flag.

    ``reset`` is False when the cache did not acknowledge the delete.
    """
    cleared = await quota.reset_breaker(provider_id)
    logger.info(f"Operator reset breaker for {provider_id} (acknowledged={cleared})")
    is_open = await quota.is_breaker_open(provider_id)
    return BreakerStatusResponse(provider_id=provider_id, open=is_open, reset=cleared)
