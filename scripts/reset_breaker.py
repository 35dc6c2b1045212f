#!/usr/bin/env python3
"""
Reset provider breaker flags.

Clears the ``<provider>_quota_exceeded`` flag so that a provider disabled
after a quota failure is used again before the flag's TTL expires.

Usage:
    python scripts/reset_breaker.py                 # youtube (default)
    python scripts/reset_breaker.py gemini spoonacular
    python scripts/reset_breaker.py --all
    python scripts/reset_breaker.py --status-only gemini

The Redis URL comes from RECIPE_SYNTH_REDIS_URL (see core/config.py).
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from redis.asyncio import Redis  # noqa: E402

from recipe_synthesis.core.config import get_settings  # noqa: E402
from recipe_synthesis.services.cache import TimedCache  # noqa: E402
from recipe_synthesis.services.quota import QuotaGovernor, breaker_key  # noqa: E402

KNOWN_PROVIDERS = ("gemini", "spoonacular", "youtube")
DEFAULT_PROVIDER = "youtube"


async def reset_breakers(
    quota: QuotaGovernor,
    provider_ids: Sequence[str],
    status_only: bool = False,
) -> bool:
    """
    Report and (unless ``status_only``) clear each provider's breaker.

    Returns:
        True when every requested breaker ends up closed
    """
    all_closed = True
    for provider_id in provider_ids:
        was_open = await quota.is_breaker_open(provider_id)
        print(f"{breaker_key(provider_id)}: {'set' if was_open else 'not set'}")

        if status_only or not was_open:
            all_closed = all_closed and not was_open
            continue

        acknowledged = await quota.reset_breaker(provider_id)
        still_open = await quota.is_breaker_open(provider_id)
        print(
            f"  cleared={acknowledged} verification="
            f"{'still set' if still_open else 'not set (success)'}"
        )
        all_closed = all_closed and not still_open
    return all_closed


async def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Reset provider breaker flags")
    parser.add_argument(
        "providers",
        nargs="*",
        help=f"Provider ids (default: {DEFAULT_PROVIDER})",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help=f"Reset every known provider ({', '.join(KNOWN_PROVIDERS)})",
    )
    parser.add_argument(
        "--status-only",
        action="store_true",
        help="Only report breaker state",
    )
    args = parser.parse_args(argv)

    provider_ids = list(KNOWN_PROVIDERS) if args.all else (args.providers or [DEFAULT_PROVIDER])

    settings = get_settings()
    redis_client = Redis.from_url(settings.redis_url, decode_responses=True)
    cache = TimedCache(
        redis_client,
        operation_timeout_seconds=settings.cache_operation_timeout_seconds,
    )

    health = await cache.check_health()
    if not health.ping_success:
        print(f"Cache unavailable: {health.error}")
        await redis_client.aclose()
        return 1

    try:
        ok = await reset_breakers(QuotaGovernor(cache), provider_ids, args.status_only)
    finally:
        await redis_client.aclose()
    return 0 if ok or args.status_only else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
