"""
Custom exceptions for the Recipe Synthesis service.

All exceptions inherit from RecipeSynthesisException and include error codes for
consistent error handling and API responses.

Propagation rules:
- InvalidRequestError is the only exception a caller of the synthesis entry
  point ever sees.
- ProviderError subclasses are raised by provider adapters and absorbed by the
  FallbackOrchestrator.
- CacheDegradedError never leaves TimedCache; it labels degraded outcomes.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Error codes for Recipe Synthesis exceptions.

    These codes provide a consistent way to identify error types
    across the API and in logging.
    """

    SYNTHESIS_ERROR = "SYNTHESIS_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    PROVIDER_TRANSIENT = "PROVIDER_TRANSIENT"
    PROVIDER_QUOTA_EXCEEDED = "PROVIDER_QUOTA_EXCEEDED"
    PROVIDER_MALFORMED = "PROVIDER_MALFORMED"
    CACHE_DEGRADED = "CACHE_DEGRADED"


class FailureReason(str, Enum):
    """
    Why a provider attempt failed.

    TRANSIENT: network/timeout/server error; retry with the next strategy.
    QUOTA_EXCEEDED: trip the provider's breaker; no further attempts.
    MALFORMED: the provider answered but the payload could not be normalized.
    """

    TRANSIENT = "transient"
    QUOTA_EXCEEDED = "quota_exceeded"
    MALFORMED = "malformed"


class RecipeSynthesisException(Exception):
    """
    Base exception for all Recipe Synthesis errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.SYNTHESIS_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code

        for key, value in kwargs.items():
            setattr(self, key, value)


class InvalidRequestError(RecipeSynthesisException):
    """
    Raised when a synthesis request carries neither ingredients nor a dish name.

    Attributes:
        field: Name of the field that failed validation (if any).
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: str = ErrorCode.INVALID_REQUEST,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.field = field


class ProviderError(RecipeSynthesisException):
    """
    Base class for typed provider failures.

    Attributes:
        provider: Identifier of the provider (e.g., "gemini", "spoonacular").
        reason: FailureReason classifying the failure.
        status_code: HTTP status code from the provider API (if applicable).
    """

    reason: FailureReason = FailureReason.TRANSIENT
    default_error_code: ErrorCode = ErrorCode.PROVIDER_TRANSIENT

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        error_code: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code or self.default_error_code, **kwargs)
        self.provider = provider
        self.status_code = status_code


class ProviderTransientError(ProviderError):
    """Network failure, timeout, server error or an empty search result."""

    reason = FailureReason.TRANSIENT
    default_error_code = ErrorCode.PROVIDER_TRANSIENT


class ProviderQuotaExceededError(ProviderError):
    """The provider reported a rate limit or exhausted quota."""

    reason = FailureReason.QUOTA_EXCEEDED
    default_error_code = ErrorCode.PROVIDER_QUOTA_EXCEEDED


class ProviderMalformedError(ProviderError):
    """The provider answered but its payload could not be normalized."""

    reason = FailureReason.MALFORMED
    default_error_code = ErrorCode.PROVIDER_MALFORMED


class CacheDegradedError(RecipeSynthesisException):
    """
    Cache backend was unavailable, timed out, or errored.

    Raised and caught inside TimedCache only.

    Attributes:
        operation: Cache operation that degraded (get, set, delete, ping).
        key: Cache key involved (if any).
    """

    def __init__(
        self,
        message: str,
        operation: str,
        key: str | None = None,
        error_code: str = ErrorCode.CACHE_DEGRADED,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.operation = operation
        self.key = key
