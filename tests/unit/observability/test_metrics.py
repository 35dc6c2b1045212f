"""
Tests for HTTP metrics and the pipeline counters.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from recipe_synthesis.observability.metrics import MetricsMiddleware, normalize_path
from recipe_synthesis.resilience.metrics import (
    record_breaker_trip,
    record_provider_attempt,
    record_synthesis_result,
)


def _sample(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestNormalizePath:

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/", "/"),
            ("/v1/recipes/generate", "/v1/recipes/generate"),
            ("/v1/recipes/12345", "/v1/recipes/{id}"),
            ("/v1/items/42/details", "/v1/items/{id}/details"),
            ("/v1/admin/breakers/gemini", "/v1/admin/breakers/gemini"),
        ],
    )
    def test_normalize(self, path, expected) -> None:
        assert normalize_path(path) == expected


class TestMetricsMiddleware:

    def _app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(MetricsMiddleware)

        @app.get("/ping")
        async def ping() -> dict:
            return {"ok": True}

        @app.get("/metrics")
        async def metrics() -> dict:
            return {}

        return app

    def test_counts_requests(self) -> None:
        labels = {"method": "GET", "path": "/ping", "status": "200"}
        before = _sample("recipe_synthesis_http_requests_total", labels)

        TestClient(self._app()).get("/ping")

        assert _sample("recipe_synthesis_http_requests_total", labels) == before + 1

    def test_metrics_path_excluded(self) -> None:
        labels = {"method": "GET", "path": "/metrics", "status": "200"}
        before = _sample("recipe_synthesis_http_requests_total", labels)

        TestClient(self._app()).get("/metrics")

        assert _sample("recipe_synthesis_http_requests_total", labels) == before


class TestPipelineCounters:

    def test_provider_attempt_counter(self) -> None:
        labels = {"provider": "gemini", "outcome": "malformed"}
        before = _sample("recipe_synthesis_provider_attempts_total", labels)

        record_provider_attempt("gemini", "malformed")

        assert _sample("recipe_synthesis_provider_attempts_total", labels) == before + 1

    def test_breaker_and_result_counters(self) -> None:
        trips_before = _sample("recipe_synthesis_breaker_trips_total", {"provider": "youtube"})
        results_before = _sample("recipe_synthesis_results_total", {"provenance": "EMERGENCY"})

        record_breaker_trip("youtube")
        record_synthesis_result("EMERGENCY")

        assert _sample("recipe_synthesis_breaker_trips_total", {"provider": "youtube"}) == trips_before + 1
        assert _sample("recipe_synthesis_results_total", {"provenance": "EMERGENCY"}) == results_before + 1
