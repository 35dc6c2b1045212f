"""
Provider Base Interface

Abstract base class for recipe provider adapters. Every adapter wraps one
external content source and returns a normalized SynthesisResult, or raises
a typed ProviderError (transient, quota exceeded, malformed).

Design Pattern:
- Ports and Adapters (Hexagonal Architecture)
- RecipeProvider serves as the "port" (interface)
- GeminiRecipeProvider, SpoonacularRecipeProvider and FakeRecipeProvider
  serve as "adapters"
"""

from abc import ABC, abstractmethod

from recipe_synthesis.models.domain import SynthesisRequest, SynthesisResult


class RecipeProvider(ABC):
    """
    Abstract base class for recipe provider adapters.

    Adapters may vary their request strategy across attempts (full prompt,
    simplified prompt, alternate endpoint, alternate search mode) and must
    substitute defaults for anything the provider omitted.

    Attributes:
        provider_id: Stable identifier, also used for the breaker flag key
        max_attempts: Upper bound on attempts per request
        timeout_seconds: Time budget for a single attempt
    """

    provider_id: str = "provider"
    max_attempts: int = 1
    timeout_seconds: float = 30.0

    @property
    def is_configured(self) -> bool:
        """
        Whether the adapter has what it needs (e.g., an API key).

        Unconfigured adapters are skipped by the orchestrator.
        """
        return True

    @abstractmethod
    async def attempt(
        self, request: SynthesisRequest, attempt_number: int
    ) -> SynthesisResult:
        """
        Produce a recipe for ``request`` using the strategy for ``attempt_number``.

        Args:
            request: Validated synthesis request
            attempt_number: 1-based attempt index, at most max_attempts

        Returns:
            A fully-defaulted SynthesisResult

        Raises:
            ProviderTransientError: network/timeout/server failure, no results
            ProviderQuotaExceededError: rate limit or quota exhausted
            ProviderMalformedError: answer could not be normalized
        """
        ...

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to release."""
        return None
