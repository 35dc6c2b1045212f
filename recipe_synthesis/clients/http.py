"""
HTTP Client Module

Factory for the httpx clients used by the provider adapters. Each provider
gets its own client so that connection pools stay isolated per downstream
service.

Pattern: Factory pattern for creating configured HTTP clients
"""

from typing import Optional

import httpx


# =============================================================================
# Default Configuration Constants
# =============================================================================


DEFAULT_TIMEOUT_SECONDS: float = 30.0
"""Default transport timeout for HTTP requests in seconds.

Attempt-level deadlines are enforced separately by run_with_timeout.
"""

DEFAULT_MAX_CONNECTIONS: int = 50
"""Maximum number of connections in the pool."""

DEFAULT_MAX_KEEPALIVE: int = 10
"""Maximum number of keepalive connections."""

DEFAULT_RETRY_COUNT: int = 1
"""Connection-level retries only; request-level retries belong to the orchestrator."""

USER_AGENT = "recipe-synthesis/1.0"


def create_http_client(
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float] = None,
    max_connections: Optional[int] = None,
    max_keepalive: Optional[int] = None,
    retries: Optional[int] = None,
    headers: Optional[dict[str, str]] = None,
) -> httpx.AsyncClient:
    """
    Create a configured HTTP client with connection pooling and timeouts.

    Args:
        base_url: Base URL for all requests
        timeout_seconds: Request timeout in seconds (default: 30.0)
        max_connections: Maximum connections in pool (default: 50)
        max_keepalive: Maximum keepalive connections (default: 10)
        retries: Connection-level retries (default: 1)
        headers: Additional headers to include in all requests

    Returns:
        httpx.AsyncClient: Configured async HTTP client

    Example:
        >>> client = create_http_client(
        ...     base_url="https://api.spoonacular.com/recipes",
        ...     timeout_seconds=15.0,
        ... )
        >>> async with client:
        ...     response = await client.get("/complexSearch")
    """
    timeout = timeout_seconds if timeout_seconds is not None else DEFAULT_TIMEOUT_SECONDS
    max_conn = max_connections if max_connections is not None else DEFAULT_MAX_CONNECTIONS
    max_keep = max_keepalive if max_keepalive is not None else DEFAULT_MAX_KEEPALIVE
    retry_count = retries if retries is not None else DEFAULT_RETRY_COUNT

    limits = httpx.Limits(
        max_connections=max_conn,
        max_keepalive_connections=max_keep,
    )

    default_headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }
    if headers:
        default_headers.update(headers)

    transport = httpx.AsyncHTTPTransport(retries=retry_count, limits=limits)

    return httpx.AsyncClient(
        base_url=base_url or "",
        timeout=httpx.Timeout(timeout),
        headers=default_headers,
        transport=transport,
    )
