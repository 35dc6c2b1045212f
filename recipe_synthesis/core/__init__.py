"""
Core module for the Recipe Synthesis service.

This module contains configuration and the exception hierarchy.
"""

from recipe_synthesis.core.config import Settings, get_settings
from recipe_synthesis.core.exceptions import (
    CacheDegradedError,
    ErrorCode,
    FailureReason,
    InvalidRequestError,
    ProviderError,
    ProviderMalformedError,
    ProviderQuotaExceededError,
    ProviderTransientError,
    RecipeSynthesisException,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "ErrorCode",
    "FailureReason",
    "RecipeSynthesisException",
    "InvalidRequestError",
    "ProviderError",
    "ProviderTransientError",
    "ProviderQuotaExceededError",
    "ProviderMalformedError",
    "CacheDegradedError",
]
