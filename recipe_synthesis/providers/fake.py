"""
Fake Recipe Provider - Test Double Implementation

A FakeRecipeProvider implements the real RecipeProvider interface without
making network calls. Outcomes can be scripted per attempt, which makes the
orchestrator's fallback paths deterministic in tests.

This is NOT mocking - it's a proper implementation of the interface. It can
also back local development without API keys.
"""

import asyncio
from typing import Optional, Sequence, Union

from recipe_synthesis.models.domain import (
    Nutrition,
    Provenance,
    SynthesisRequest,
    SynthesisResult,
)
from recipe_synthesis.providers.base import RecipeProvider

Outcome = Union[SynthesisResult, Exception, None]


class FakeRecipeProvider(RecipeProvider):
    """
    Fake recipe provider for testing and local development.

    Attributes:
        provider_id: Provider identifier (also the breaker id)
        max_attempts: Attempts the orchestrator may make
        outcomes: Per-attempt script, consumed in call order. An Exception is
            raised, a SynthesisResult is returned as-is, None means "build a
            default recipe". When the script runs out, ``error_on_attempt``
            applies if set, else a default recipe is returned.
        error_on_attempt: Exception raised once the script is exhausted
        delay_seconds: Sleep before answering (for timeout tests)

    Example:
        >>> from recipe_synthesis.core.exceptions import ProviderQuotaExceededError
        >>> provider = FakeRecipeProvider(
        ...     error_on_attempt=ProviderQuotaExceededError("429", provider="fake")
        ... )
        >>> await provider.attempt(request, 1)  # Raises ProviderQuotaExceededError
    """

    def __init__(
        self,
        provider_id: str = "fake",
        max_attempts: int = 1,
        provenance: Provenance = Provenance.PRIMARY_PROVIDER,
        outcomes: Optional[Sequence[Outcome]] = None,
        error_on_attempt: Optional[Exception] = None,
        delay_seconds: float = 0.0,
        timeout_seconds: float = 5.0,
        configured: bool = True,
    ) -> None:
        self.provider_id = provider_id
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self.provenance = provenance
        self.outcomes: list[Outcome] = list(outcomes or [])
        self.error_on_attempt = error_on_attempt
        self.delay_seconds = delay_seconds
        self._configured = configured

        # Track calls for test assertions
        self.attempt_calls: list[tuple[SynthesisRequest, int]] = []
        self.closed = False

    @property
    def is_configured(self) -> bool:
        return self._configured

    async def attempt(
        self, request: SynthesisRequest, attempt_number: int
    ) -> SynthesisResult:
        self.attempt_calls.append((request, attempt_number))

        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        if self.outcomes:
            outcome = self.outcomes.pop(0)
        elif self.error_on_attempt is not None:
            outcome = self.error_on_attempt
        else:
            outcome = None

        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, SynthesisResult):
            return outcome
        return self.build_recipe(request)

    def build_recipe(self, request: SynthesisRequest) -> SynthesisResult:
        """Deterministic recipe derived from the request."""
        title = request.dish_name or f"{self.provider_id.title()} Special"
        return SynthesisResult(
            title=title,
            ingredient_list=list(request.ingredients) or [f"Ingredients for {title}"],
            instructions=f"1. Prepare {title}.\n2. Serve.",
            prep_time_minutes=10,
            cook_time_minutes=15,
            servings=2,
            nutrition=Nutrition(calories=500, protein=25, carbs=50, fat=20),
            provenance=self.provenance,
            origin=self.provider_id,
        )

    @property
    def call_count(self) -> int:
        return len(self.attempt_calls)

    async def aclose(self) -> None:
        self.closed = True
