"""
Tests for scripts/reset_breaker.py - operator breaker reset CLI.
"""

import importlib.util
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

SCRIPT_PATH = Path(__file__).resolve().parents[3] / "scripts" / "reset_breaker.py"


@pytest.fixture(scope="module")
def reset_script():
    spec = importlib.util.spec_from_file_location("reset_breaker", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestResetBreakers:

    @pytest.mark.asyncio
    async def test_clears_open_breaker(self, reset_script, quota, capsys) -> None:
        await quota.trip_breaker("youtube")

        ok = await reset_script.reset_breakers(quota, ["youtube"])

        assert ok is True
        assert await quota.is_breaker_open("youtube") is False
        output = capsys.readouterr().out
        assert "youtube_quota_exceeded: set" in output
        assert "not set (success)" in output

    @pytest.mark.asyncio
    async def test_status_only_leaves_breaker(self, reset_script, quota) -> None:
        await quota.trip_breaker("gemini")

        ok = await reset_script.reset_breakers(quota, ["gemini"], status_only=True)

        assert ok is False
        assert await quota.is_breaker_open("gemini") is True

    @pytest.mark.asyncio
    async def test_closed_breakers_report_success(self, reset_script, quota) -> None:
        assert await reset_script.reset_breakers(quota, ["gemini", "spoonacular"]) is True


class TestMain:

    @pytest.mark.asyncio
    async def test_all_flag_resets_every_known_provider(self, reset_script, fake_redis) -> None:
        for provider_id in reset_script.KNOWN_PROVIDERS:
            await fake_redis.set(f"{provider_id}_quota_exceeded", "true")

        with patch.object(reset_script.Redis, "from_url", return_value=fake_redis), \
                patch.object(fake_redis, "aclose", AsyncMock()):
            exit_code = await reset_script.main(["--all"])

        assert exit_code == 0
        for provider_id in reset_script.KNOWN_PROVIDERS:
            assert await fake_redis.get(f"{provider_id}_quota_exceeded") is None

    @pytest.mark.asyncio
    async def test_unreachable_cache_exits_nonzero(self, reset_script, capsys) -> None:
        unreachable = MagicMock()
        unreachable.ping = AsyncMock(side_effect=ConnectionError("Connection refused"))
        unreachable.aclose = AsyncMock()

        with patch.object(reset_script.Redis, "from_url", return_value=unreachable):
            exit_code = await reset_script.main(["gemini"])

        assert exit_code == 1
        assert "Cache unavailable" in capsys.readouterr().out
