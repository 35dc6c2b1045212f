"""
HTTP Metrics

Prometheus request metrics for the API surface, collected by an ASGI
middleware and exposed through ``GET /metrics`` together with the pipeline
counters defined in recipe_synthesis.resilience.metrics.
"""

import re
import time
from typing import Any, Callable, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST

# Numeric segments would explode label cardinality.
_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


def normalize_path(path: str) -> str:
    """
    Replace numeric path segments with ``{id}``.

    Examples:
        >>> normalize_path("/v1/recipes/generate")
        '/v1/recipes/generate'
        >>> normalize_path("/v1/recipes/12345")
        '/v1/recipes/{id}'
    """
    if path == "/":
        return path
    return _NUMERIC_SEGMENT.sub("/{id}", path)


REQUESTS_TOTAL = Counter(
    name="recipe_synthesis_http_requests_total",
    documentation="Total number of HTTP requests",
    labelnames=["method", "path", "status"],
)

REQUEST_DURATION_SECONDS = Histogram(
    name="recipe_synthesis_http_request_duration_seconds",
    documentation="HTTP request duration in seconds",
    labelnames=["method", "path"],
    # Provider attempts run up to 30s each, so the tail is long.
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

REQUESTS_IN_PROGRESS = Gauge(
    name="recipe_synthesis_http_requests_in_progress",
    documentation="Number of HTTP requests currently being processed",
    labelnames=["method"],
)


class MetricsMiddleware:
    """
    ASGI middleware recording request count, latency and in-flight requests.

    The scrape endpoint itself is excluded.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        exclude_paths: Optional[list[str]] = None,
    ) -> None:
        self.app = app
        self.exclude_paths = exclude_paths or ["/metrics"]

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        raw_path = scope.get("path", "/")
        if raw_path in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = normalize_path(raw_path)

        REQUESTS_IN_PROGRESS.labels(method=method).inc()
        start_time = time.perf_counter()
        status_code = "500"

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = str(message.get("status", 500))
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration = time.perf_counter() - start_time
            REQUESTS_TOTAL.labels(method=method, path=path, status=status_code).inc()
            REQUEST_DURATION_SECONDS.labels(method=method, path=path).observe(duration)
            REQUESTS_IN_PROGRESS.labels(method=method).dec()


def generate_metrics() -> bytes:
    """Prometheus text exposition of the default registry."""
    return generate_latest(REGISTRY)
