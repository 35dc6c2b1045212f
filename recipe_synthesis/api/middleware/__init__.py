"""
API Middleware Package

- logging: Request logging with header redaction and correlation IDs
"""

from recipe_synthesis.api.middleware.logging import RequestLoggingMiddleware, redact_sensitive_headers

__all__ = [
    "RequestLoggingMiddleware",
    "redact_sensitive_headers",
]
