"""
Request Logging Middleware

Logs every request with method, path, status and duration, and scopes a
correlation ID to it so that pipeline events emitted while serving the
request can be joined back to it.

The correlation ID comes from the ``X-Request-ID`` header when the caller
sends one and is echoed back on the response.
"""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from recipe_synthesis.observability.logging import correlation_id_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# API keys travel as query parameters or headers; never log them.
SENSITIVE_HEADER_PATTERNS = [
    "authorization",
    "api-key",
    "apikey",
    "x-api-key",
    "api_key",
    "x-goog-api-key",
    "cookie",
    "set-cookie",
]


def redact_sensitive_headers(headers: dict[str, str]) -> dict[str, str]:
    """
    Replace the values of credential-bearing headers with ``[REDACTED]``.

    Args:
        headers: Dictionary of HTTP headers

    Returns:
        Copy of ``headers`` safe to log
    """
    redacted = {}
    for key, value in headers.items():
        key_lower = key.lower()
        is_sensitive = any(pattern in key_lower for pattern in SENSITIVE_HEADER_PATTERNS)
        redacted[key] = "[REDACTED]" if is_sensitive else value
    return redacted


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Per-request access log and correlation ID scope."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        client_host = request.client.host if request.client else "unknown"
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        with correlation_id_context(request_id):
            logger.debug(
                f"Request: {method} {path} from {client_host} "
                f"headers={redact_sensitive_headers(dict(request.headers))}"
            )

            try:
                response = await call_next(request)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"Request failed: {method} {path} request_id={request_id} "
                    f"error={type(e).__name__}: {e} duration={duration_ms:.2f}ms"
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
            logger.log(
                log_level,
                f"{method} {path} {response.status_code} request_id={request_id} "
                f"duration={duration_ms:.2f}ms",
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
