"""
Tests for the admin router: quota snapshot and breaker reset.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from recipe_synthesis.api.deps import get_quota_governor


@pytest.fixture
def admin_app(quota):
    from recipe_synthesis.main import create_app

    app = create_app()
    app.dependency_overrides[get_quota_governor] = lambda: quota
    return app


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestQuotaEndpoint:

    @pytest.mark.asyncio
    async def test_reports_current_window(self, admin_app, quota) -> None:
        quota.try_consume_primary_quota()
        quota.try_consume_primary_quota()

        async with _client(admin_app) as ac:
            response = await ac.get("/v1/admin/quota")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert body["limit"] == 50
        assert body["remaining"] == 48
        assert body["limited"] is True


class TestBreakerEndpoints:

    @pytest.mark.asyncio
    async def test_closed_breaker(self, admin_app) -> None:
        async with _client(admin_app) as ac:
            response = await ac.get("/v1/admin/breakers/gemini")

        assert response.json() == {"provider_id": "gemini", "open": False, "reset": None}

    @pytest.mark.asyncio
    async def test_open_breaker_reported_and_reset(self, admin_app, quota) -> None:
        await quota.trip_breaker("youtube")

        async with _client(admin_app) as ac:
            before = await ac.get("/v1/admin/breakers/youtube")
            reset = await ac.delete("/v1/admin/breakers/youtube")

        assert before.json()["open"] is True
        assert reset.status_code == 200
        assert reset.json() == {"provider_id": "youtube", "open": False, "reset": True}
        assert await quota.is_breaker_open("youtube") is False

    @pytest.mark.asyncio
    async def test_reset_leaves_other_breakers_alone(self, admin_app, quota) -> None:
        await quota.trip_breaker("gemini")
        await quota.trip_breaker("spoonacular")

        async with _client(admin_app) as ac:
            await ac.delete("/v1/admin/breakers/gemini")

        assert await quota.is_breaker_open("gemini") is False
        assert await quota.is_breaker_open("spoonacular") is True
