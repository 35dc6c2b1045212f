"""
Gemini Provider - Google Generative AI Recipe Adapter

Primary (generative) recipe provider. Each attempt uses a different request
strategy so that a failure mode specific to one prompt or model does not
repeat on every retry:

    attempt 1: full structured-JSON prompt on the configured model
    attempt 2: simplified free-form prompt on the configured model
    attempt 3: structured prompt on the alternate model

Responses are text; RecipeTextParser extracts the payload and
normalize_recipe fills in defaults.

Design Patterns:
- Ports and Adapters: GeminiRecipeProvider implements RecipeProvider
- Strategy per attempt instead of blind retries
"""

import logging
from typing import Any, Optional

import httpx

from recipe_synthesis.clients.http import create_http_client
from recipe_synthesis.core.exceptions import (
    ProviderMalformedError,
    ProviderQuotaExceededError,
    ProviderTransientError,
)
from recipe_synthesis.models.domain import Provenance, SynthesisRequest, SynthesisResult
from recipe_synthesis.providers.base import RecipeProvider
from recipe_synthesis.providers.normalization import normalize_recipe
from recipe_synthesis.providers.parsing import RecipeTextParser

logger = logging.getLogger(__name__)

# =============================================================================
# Defaults
# =============================================================================

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-pro"
DEFAULT_ALTERNATE_MODEL = "gemini-1.5-flash"

STRUCTURED_GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 1024,
    "topP": 0.95,
    "topK": 40,
}
SIMPLIFIED_GENERATION_CONFIG = {
    "temperature": 0.8,
    "maxOutputTokens": 1024,
}
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_ONLY_HIGH"},
]

RESPONSE_FORMAT_INSTRUCTIONS = """
Please format the response as a JSON object with the following structure:
{
  "name": "Recipe Name",
  "ingredients": ["ingredient 1", "ingredient 2"],
  "instructions": "Step-by-step cooking instructions",
  "prepTime": preparation time in minutes (number),
  "cookTime": cooking time in minutes (number),
  "servings": number of servings (number),
  "nutritionFacts": {
    "calories": calories per serving (number),
    "protein": protein in grams (number),
    "carbs": carbohydrates in grams (number),
    "fats": fats in grams (number)
  }
}

Make sure the recipe is practical, delicious, and the instructions are clear and detailed."""


# =============================================================================
# Prompt builders
# =============================================================================


def build_structured_prompt(request: SynthesisRequest) -> str:
    """Full prompt asking for a JSON recipe object."""
    if request.has_ingredients:
        prompt = (
            f"Create a detailed recipe using these ingredients: "
            f"{', '.join(request.ingredients)}."
        )
        if request.has_dish_name:
            prompt += f" Try to make a recipe for {request.dish_name}."
    else:
        prompt = f"Create a detailed recipe for {request.dish_name}."
    return prompt + "\n" + RESPONSE_FORMAT_INSTRUCTIONS


def build_simplified_prompt(request: SynthesisRequest) -> str:
    """Short prompt with no formatting requirements."""
    ingredients = ", ".join(request.ingredients) or "any ingredients"
    dish = f"{request.dish_name} " if request.has_dish_name else ""
    return f"Create a recipe for {dish}using these ingredients: {ingredients}"


# =============================================================================
# Gemini Provider
# =============================================================================


class GeminiRecipeProvider(RecipeProvider):
    """
    Google Gemini recipe adapter.

    Error mapping:
        429                      -> ProviderQuotaExceededError
        other non-200, transport -> ProviderTransientError
        no candidate text        -> ProviderMalformedError
        unparseable text         -> ProviderMalformedError (from the parser)

    Example:
        >>> provider = GeminiRecipeProvider(api_key="AIza...")
        >>> result = await provider.attempt(request, attempt_number=1)
    """

    provider_id = "gemini"
    max_attempts = 3

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        alternate_model: str = DEFAULT_ALTERNATE_MODEL,
        api_base: str = GEMINI_API_BASE,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize Gemini provider.

        Args:
            api_key: Google AI API key. Without one the adapter is unconfigured.
            model: Model used by attempts 1 and 2
            alternate_model: Model used by attempt 3
            api_base: API base URL
            timeout_seconds: Per-attempt time budget
            client: Preconfigured httpx client (tests inject a mock)
        """
        self._api_key = api_key or ""
        if not self._api_key:
            logger.warning("No Gemini API key provided; Gemini provider disabled")

        self._model = model
        self._alternate_model = alternate_model
        self._api_base = api_base.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client or create_http_client(timeout_seconds=timeout_seconds)
        self._parser = RecipeTextParser(provider=self.provider_id)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def aclose(self) -> None:
        await self._client.aclose()

    # =========================================================================
    # attempt()
    # =========================================================================

    async def attempt(
        self, request: SynthesisRequest, attempt_number: int
    ) -> SynthesisResult:
        """
        Generate a recipe with the strategy for ``attempt_number``.

        Raises:
            ProviderTransientError, ProviderQuotaExceededError,
            ProviderMalformedError
        """
        model, prompt, generation_config = self._strategy(request, attempt_number)
        logger.debug(f"Gemini attempt {attempt_number} using model {model}")

        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if attempt_number != 2:
            payload["safetySettings"] = SAFETY_SETTINGS

        data = await self._post(model, payload)
        text = self.extract_text(data)
        if not text.strip():
            raise ProviderMalformedError(
                "Gemini response contained no candidate text", provider=self.provider_id
            )

        parsed = self._parser.parse(text)
        logger.debug(f"Gemini attempt {attempt_number} parsed via {parsed.tier.value}")
        return normalize_recipe(
            parsed.payload,
            request,
            provenance=Provenance.PRIMARY_PROVIDER,
            origin=self.provider_id,
        )

    def _strategy(
        self, request: SynthesisRequest, attempt_number: int
    ) -> tuple[str, str, dict[str, Any]]:
        if attempt_number == 2:
            return self._model, build_simplified_prompt(request), SIMPLIFIED_GENERATION_CONFIG
        if attempt_number >= 3:
            return self._alternate_model, build_structured_prompt(request), STRUCTURED_GENERATION_CONFIG
        return self._model, build_structured_prompt(request), STRUCTURED_GENERATION_CONFIG

    # =========================================================================
    # HTTP
    # =========================================================================

    async def _post(self, model: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._api_base}/models/{model}:generateContent?key={self._api_key}"
        try:
            response = await self._client.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise ProviderTransientError(
                f"Gemini request failed: {type(e).__name__}: {e}",
                provider=self.provider_id,
            ) from e

        if response.status_code != 200:
            self._handle_error_response(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderMalformedError(
                f"Gemini returned a non-JSON body: {e}", provider=self.provider_id
            ) from e

    def _handle_error_response(self, status_code: int, error_text: str) -> None:
        """
        Raise the typed failure for a non-200 response.

        Raises:
            ProviderQuotaExceededError: For 429
            ProviderTransientError: For everything else (auth failures included)
        """
        if status_code == 429:
            raise ProviderQuotaExceededError(
                f"Gemini rate limit exceeded: {error_text[:200]}",
                provider=self.provider_id,
                status_code=status_code,
            )

        raise ProviderTransientError(
            f"Gemini API error ({status_code}): {error_text[:200]}",
            provider=self.provider_id,
            status_code=status_code,
        )

    @staticmethod
    def extract_text(data: dict[str, Any]) -> str:
        """Concatenated text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))
