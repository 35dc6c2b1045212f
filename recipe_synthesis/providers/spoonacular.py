"""
Spoonacular Provider - structured recipe database adapter

Secondary recipe provider. An attempt is a candidate search followed by a
detail lookup of the best-ranked candidate:

    attempt 1: search by ingredients when present, else by dish name
    attempt 2: switch to the other search mode when its input is present;
               otherwise broaden the query (first word of the dish name, or
               the leading ingredients with a "fewest missing" ranking)

Endpoints:
    GET /findByIngredients
    GET /complexSearch
    GET /{id}/information?includeNutrition=true
"""

import logging
import re
from enum import Enum
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

logger = logging.getLogger(__name__)

SPOONACULAR_API_BASE = "https://api.spoonacular.com/recipes"
CANDIDATE_COUNT = 5
BROADENED_INGREDIENT_COUNT = 3

# 402: daily points exhausted, 429: rate limited
QUOTA_STATUS_CODES = (402, 429)

NUTRIENT_NAMES = {
    "calories": "Calories",
    "protein": "Protein",
    "carbs": "Carbohydrates",
    "fat": "Fat",
}

_HTML_TAG_PATTERN = re.compile(r"<[^>]+>")


class SearchMode(str, Enum):
    """Candidate search strategy."""

    BY_INGREDIENTS = "by_ingredients"
    BY_DISH_NAME = "by_dish_name"
    BROAD_INGREDIENTS = "broad_ingredients"
    BROAD_DISH_NAME = "broad_dish_name"


def select_search_mode(request: SynthesisRequest, attempt_number: int) -> SearchMode:
    """
    Search mode for ``attempt_number``.

    Example:
        >>> select_search_mode(SynthesisRequest(dish_name="Pad Thai"), 2)
        <SearchMode.BROAD_DISH_NAME: 'broad_dish_name'>
    """
    if attempt_number <= 1:
        return SearchMode.BY_INGREDIENTS if request.has_ingredients else SearchMode.BY_DISH_NAME
    if request.has_ingredients and request.has_dish_name:
        return SearchMode.BY_DISH_NAME
    if request.has_ingredients:
        return SearchMode.BROAD_INGREDIENTS
    return SearchMode.BROAD_DISH_NAME


class SpoonacularRecipeProvider(RecipeProvider):
    """
    Spoonacular recipe adapter.

    Error mapping:
        402, 429                 -> ProviderQuotaExceededError
        other non-200, transport -> ProviderTransientError
        no candidates            -> ProviderTransientError
        unusable detail body     -> ProviderMalformedError
    """

    provider_id = "spoonacular"
    max_attempts = 2

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: str = SPOONACULAR_API_BASE,
        timeout_seconds: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key or ""
        if not self._api_key:
            logger.warning("No Spoonacular API key provided; Spoonacular provider disabled")
        self._api_base = api_base.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client or create_http_client(timeout_seconds=timeout_seconds)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def attempt(
        self, request: SynthesisRequest, attempt_number: int
    ) -> SynthesisResult:
        mode = select_search_mode(request, attempt_number)
        logger.debug(f"Spoonacular attempt {attempt_number} searching {mode.value}")

        recipe_id = await self._search(request, mode)
        if recipe_id is None:
            raise ProviderTransientError(
                f"Spoonacular found no candidates ({mode.value})",
                provider=self.provider_id,
            )

        detail = await self._get(
            f"/{recipe_id}/information", {"includeNutrition": "true"}
        )
        if not isinstance(detail, dict) or not detail.get("title"):
            raise ProviderMalformedError(
                f"Spoonacular detail for {recipe_id} has no title",
                provider=self.provider_id,
            )

        return normalize_recipe(
            self.map_detail(detail),
            request,
            provenance=Provenance.SECONDARY_PROVIDER,
            origin=self.provider_id,
        )

    # =========================================================================
    # Search
    # =========================================================================

    async def _search(self, request: SynthesisRequest, mode: SearchMode) -> Optional[Any]:
        if mode in (SearchMode.BY_INGREDIENTS, SearchMode.BROAD_INGREDIENTS):
            ingredients = list(request.ingredients)
            if mode == SearchMode.BROAD_INGREDIENTS:
                ingredients = ingredients[:BROADENED_INGREDIENT_COUNT]
            data = await self._get(
                "/findByIngredients",
                {
                    "ingredients": ",".join(ingredients),
                    "number": CANDIDATE_COUNT,
                    # 1 maximizes used ingredients, 2 minimizes missing ones
                    "ranking": 2 if mode == SearchMode.BROAD_INGREDIENTS else 1,
                    "ignorePantry": "true",
                },
            )
            candidates = data if isinstance(data, list) else []
        else:
            dish_name = request.dish_name or ""
            query = dish_name.split()[0] if mode == SearchMode.BROAD_DISH_NAME else dish_name
            data = await self._get(
                "/complexSearch", {"query": query, "number": CANDIDATE_COUNT}
            )
            candidates = data.get("results", []) if isinstance(data, dict) else []

        for candidate in candidates:
            if isinstance(candidate, dict) and candidate.get("id") is not None:
                return candidate["id"]
        return None

    # =========================================================================
    # HTTP
    # =========================================================================

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        try:
            response = await self._client.get(
                f"{self._api_base}{path}",
                params={"apiKey": self._api_key, **params},
            )
        except httpx.HTTPError as e:
            raise ProviderTransientError(
                f"Spoonacular request failed: {type(e).__name__}: {e}",
                provider=self.provider_id,
            ) from e

        if response.status_code in QUOTA_STATUS_CODES:
            raise ProviderQuotaExceededError(
                f"Spoonacular quota exceeded ({response.status_code})",
                provider=self.provider_id,
                status_code=response.status_code,
            )
        if response.status_code != 200:
            raise ProviderTransientError(
                f"Spoonacular API error ({response.status_code}): {response.text[:200]}",
                provider=self.provider_id,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderMalformedError(
                f"Spoonacular returned a non-JSON body: {e}", provider=self.provider_id
            ) from e

    # =========================================================================
    # Mapping
    # =========================================================================

    @staticmethod
    def map_detail(detail: dict[str, Any]) -> dict[str, Any]:
        """Translate a recipe-information body into the normalizer's field names."""
        ready = detail.get("readyInMinutes")
        half_ready = int(ready) // 2 if isinstance(ready, (int, float)) and ready > 0 else None

        def minutes(key: str) -> Optional[int]:
            value = detail.get(key)
            if isinstance(value, (int, float)) and value > 0:
                return int(value)
            return half_ready

        nutrients = (detail.get("nutrition") or {}).get("nutrients") or []
        amounts = {
            n.get("name"): n.get("amount") for n in nutrients if isinstance(n, dict)
        }

        instructions = detail.get("instructions") or ""
        if instructions:
            instructions = _HTML_TAG_PATTERN.sub("\n", instructions)
            instructions = "\n".join(
                line.strip() for line in instructions.splitlines() if line.strip()
            )
        elif detail.get("analyzedInstructions"):
            instructions = [
                step.get("step", "")
                for block in detail["analyzedInstructions"]
                for step in block.get("steps", [])
            ]

        return {
            "name": detail.get("title"),
            "ingredients": [
                ing.get("original") or ing.get("name")
                for ing in detail.get("extendedIngredients") or []
                if isinstance(ing, dict) and (ing.get("original") or ing.get("name"))
            ],
            "instructions": instructions,
            "prepTime": minutes("preparationMinutes"),
            "cookTime": minutes("cookingMinutes"),
            "servings": detail.get("servings"),
            "nutrition": {
                field: amounts.get(name) or 0 for field, name in NUTRIENT_NAMES.items()
            },
            "image": detail.get("image"),
            "sourceUrl": detail.get("sourceUrl"),
            "id": detail.get("id"),
        }
