"""
Clients Package - HTTP client setup for the provider adapters.
"""

from recipe_synthesis.clients.http import (
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_MAX_KEEPALIVE,
    DEFAULT_RETRY_COUNT,
    DEFAULT_TIMEOUT_SECONDS,
    create_http_client,
)

__all__ = [
    "create_http_client",
    "DEFAULT_MAX_CONNECTIONS",
    "DEFAULT_MAX_KEEPALIVE",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_TIMEOUT_SECONDS",
]
