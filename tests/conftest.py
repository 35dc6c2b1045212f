"""
Pytest configuration and shared fixtures.

This configuration sets up:
- Project root on sys.path
- Test markers for categorization
- FakeRedis-backed TimedCache and QuotaGovernor
- Sample requests and results
"""

import sys
from pathlib import Path

import fakeredis
import fakeredis.aioredis
import pytest

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Test Markers
# =============================================================================


def pytest_configure(config):
    """
    Register custom markers for test categorization.

    - unit: Tests for individual components
    - integration: Full fallback-chain scenarios
    - slow: Tests that wait on real timeouts
    """
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for the fallback chain")
    config.addinivalue_line("markers", "slow: Tests that take a long time to run")


# =============================================================================
# FakeRedis Fixtures
# =============================================================================


@pytest.fixture
def fake_redis():
    """
    Fake Redis client with its own server so that keys never leak between tests.

    Returns:
        FakeRedis: A fake Redis client with decode_responses=True
    """
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def cache(fake_redis):
    """TimedCache over fake Redis."""
    from recipe_synthesis.services.cache import TimedCache

    return TimedCache(fake_redis, operation_timeout_seconds=1.0, liveness_timeout_seconds=1.0)


@pytest.fixture
def degraded_cache():
    """TimedCache with no backend: every read misses, every write degrades."""
    from recipe_synthesis.services.cache import TimedCache

    return TimedCache(None)


@pytest.fixture
def quota(cache):
    """QuotaGovernor with the default ceiling over the fake cache."""
    from recipe_synthesis.services.quota import QuotaGovernor

    return QuotaGovernor(cache, max_daily_calls=50)


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def sample_request():
    from recipe_synthesis.models.domain import SynthesisRequest

    return SynthesisRequest(ingredients=["chicken", "rice"], dish_name="Chicken Fried Rice")


@pytest.fixture
def sample_result():
    from recipe_synthesis.models.domain import Nutrition, Provenance, SynthesisResult

    return SynthesisResult(
        title="Chicken Fried Rice",
        ingredient_list=["2 cups cooked rice", "1 chicken breast", "2 eggs"],
        instructions="1. Cook the chicken.\n2. Fry the rice.\n3. Combine.",
        prep_time_minutes=15,
        cook_time_minutes=20,
        servings=4,
        nutrition=Nutrition(calories=450, protein=28, carbs=55, fat=12),
        provenance=Provenance.PRIMARY_PROVIDER,
        origin="gemini",
    )


@pytest.fixture
def test_settings():
    """Settings with fake keys and a local Redis URL (never contacted)."""
    from recipe_synthesis.core.config import Settings

    return Settings(
        redis_url="redis://localhost:6379/15",
        gemini_api_key="test-gemini-key",
        spoonacular_api_key="test-spoonacular-key",
        youtube_api_key="test-youtube-key",
    )
