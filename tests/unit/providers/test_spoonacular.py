"""
Tests for SpoonacularRecipeProvider - search modes, detail mapping and error
classification.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from recipe_synthesis.core.exceptions import (
    ProviderMalformedError,
    ProviderQuotaExceededError,
    ProviderTransientError,
)
from recipe_synthesis.models.domain import Provenance, SynthesisRequest
from recipe_synthesis.providers.spoonacular import (
    SearchMode,
    SpoonacularRecipeProvider,
    select_search_mode,
)


DETAIL = {
    "id": 716429,
    "title": "Pasta with Garlic, Scallions and Broccoli",
    "image": "https://img.spoonacular.com/recipes/716429-556x370.jpg",
    "sourceUrl": "https://fullbellysisters.blogspot.com/2012/06/pasta.html",
    "servings": 2,
    "readyInMinutes": 45,
    "preparationMinutes": 10,
    "cookingMinutes": -1,
    "extendedIngredients": [
        {"original": "1 tbsp butter", "name": "butter"},
        {"name": "broccoli"},
        {},
    ],
    "instructions": "<ol><li>Boil the pasta.</li><li>Saute the garlic.</li></ol>",
    "nutrition": {
        "nutrients": [
            {"name": "Calories", "amount": 584.46, "unit": "kcal"},
            {"name": "Protein", "amount": 19.34, "unit": "g"},
            {"name": "Carbohydrates", "amount": 83.95, "unit": "g"},
            {"name": "Fat", "amount": 19.96, "unit": "g"},
        ]
    },
}


def _response(status_code: int = 200, body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = text
    return response


def _provider(*responses) -> tuple[SpoonacularRecipeProvider, MagicMock]:
    client = MagicMock()
    client.get = AsyncMock(side_effect=list(responses))
    client.aclose = AsyncMock()
    return SpoonacularRecipeProvider(api_key="spoon-key", client=client), client


class TestSelectSearchMode:

    def test_first_attempt_prefers_ingredients(self) -> None:
        request = SynthesisRequest(ingredients=["rice"], dish_name="Risotto")

        assert select_search_mode(request, 1) == SearchMode.BY_INGREDIENTS

    def test_first_attempt_dish_only(self) -> None:
        assert select_search_mode(SynthesisRequest(dish_name="Risotto"), 1) == SearchMode.BY_DISH_NAME

    def test_second_attempt_switches_mode_when_both_present(self) -> None:
        request = SynthesisRequest(ingredients=["rice"], dish_name="Risotto")

        assert select_search_mode(request, 2) == SearchMode.BY_DISH_NAME

    def test_second_attempt_broadens_ingredients(self) -> None:
        request = SynthesisRequest(ingredients=["rice", "peas"])

        assert select_search_mode(request, 2) == SearchMode.BROAD_INGREDIENTS

    def test_second_attempt_broadens_dish_name(self) -> None:
        assert select_search_mode(SynthesisRequest(dish_name="Risotto"), 2) == (
            SearchMode.BROAD_DISH_NAME
        )


class TestAttempt:

    @pytest.mark.asyncio
    async def test_ingredient_search_then_detail(self) -> None:
        provider, client = _provider(
            _response(body=[{"id": 716429, "title": "Pasta"}]),
            _response(body=DETAIL),
        )
        request = SynthesisRequest(ingredients=["pasta", "garlic"])

        result = await provider.attempt(request, 1)

        search_call, detail_call = client.get.await_args_list
        assert search_call.args[0].endswith("/findByIngredients")
        assert search_call.kwargs["params"]["ingredients"] == "pasta,garlic"
        assert search_call.kwargs["params"]["ranking"] == 1
        assert search_call.kwargs["params"]["apiKey"] == "spoon-key"
        assert detail_call.args[0].endswith("/716429/information")
        assert detail_call.kwargs["params"]["includeNutrition"] == "true"

        assert result.title == "Pasta with Garlic, Scallions and Broccoli"
        assert result.provenance == Provenance.SECONDARY_PROVIDER
        assert result.origin == "spoonacular"
        assert result.source_id == "716429"

    @pytest.mark.asyncio
    async def test_dish_name_search(self) -> None:
        provider, client = _provider(
            _response(body={"results": [{"id": 1}]}),
            _response(body=DETAIL),
        )

        await provider.attempt(SynthesisRequest(dish_name="Chicken Tikka Masala"), 1)

        search_call = client.get.await_args_list[0]
        assert search_call.args[0].endswith("/complexSearch")
        assert search_call.kwargs["params"]["query"] == "Chicken Tikka Masala"

    @pytest.mark.asyncio
    async def test_broad_dish_name_search_uses_first_word(self) -> None:
        provider, client = _provider(
            _response(body={"results": [{"id": 1}]}),
            _response(body=DETAIL),
        )

        await provider.attempt(SynthesisRequest(dish_name="Chicken Tikka Masala"), 2)

        assert client.get.await_args_list[0].kwargs["params"]["query"] == "Chicken"

    @pytest.mark.asyncio
    async def test_broad_ingredient_search_limits_and_reranks(self) -> None:
        provider, client = _provider(
            _response(body=[{"id": 1}]),
            _response(body=DETAIL),
        )
        request = SynthesisRequest(ingredients=["a", "b", "c", "d", "e"])

        await provider.attempt(request, 2)

        params = client.get.await_args_list[0].kwargs["params"]
        assert params["ingredients"] == "a,b,c"
        assert params["ranking"] == 2

    @pytest.mark.asyncio
    async def test_no_candidates_is_transient(self) -> None:
        provider, client = _provider(_response(body=[]))

        with pytest.raises(ProviderTransientError):
            await provider.attempt(SynthesisRequest(ingredients=["unobtainium"]), 1)

        assert client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_detail_without_title_is_malformed(self) -> None:
        provider, _ = _provider(_response(body=[{"id": 1}]), _response(body={"id": 1}))

        with pytest.raises(ProviderMalformedError):
            await provider.attempt(SynthesisRequest(ingredients=["rice"]), 1)


class TestErrorMapping:

    @pytest.mark.parametrize("status_code", [402, 429])
    @pytest.mark.asyncio
    async def test_quota_status_codes(self, status_code) -> None:
        provider, _ = _provider(_response(status_code, text="quota"))

        with pytest.raises(ProviderQuotaExceededError) as exc_info:
            await provider.attempt(SynthesisRequest(dish_name="Soup"), 1)

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self) -> None:
        provider, _ = _provider(_response(500, text="oops"))

        with pytest.raises(ProviderTransientError):
            await provider.attempt(SynthesisRequest(dish_name="Soup"), 1)

    @pytest.mark.asyncio
    async def test_transport_error_is_transient(self) -> None:
        provider, _ = _provider(httpx.ReadTimeout("timed out"))

        with pytest.raises(ProviderTransientError):
            await provider.attempt(SynthesisRequest(dish_name="Soup"), 1)


class TestMapDetail:

    def test_maps_fields(self) -> None:
        mapped = SpoonacularRecipeProvider.map_detail(DETAIL)

        assert mapped["name"] == DETAIL["title"]
        assert mapped["ingredients"] == ["1 tbsp butter", "broccoli"]
        assert mapped["instructions"] == "Boil the pasta.\nSaute the garlic."
        assert mapped["servings"] == 2
        assert mapped["image"] == DETAIL["image"]
        assert mapped["id"] == 716429

    def test_times_fall_back_to_half_ready_time(self) -> None:
        mapped = SpoonacularRecipeProvider.map_detail(DETAIL)

        assert mapped["prepTime"] == 10
        assert mapped["cookTime"] == 22

    def test_nutrients_by_name(self) -> None:
        nutrition = SpoonacularRecipeProvider.map_detail(DETAIL)["nutrition"]

        assert nutrition == {"calories": 584.46, "protein": 19.34, "carbs": 83.95, "fat": 19.96}

    def test_missing_nutrients_are_zero(self) -> None:
        nutrition = SpoonacularRecipeProvider.map_detail({"title": "Plain"})["nutrition"]

        assert nutrition == {"calories": 0, "protein": 0, "carbs": 0, "fat": 0}

    def test_analyzed_instructions_fallback(self) -> None:
        detail = {
            "title": "Toast",
            "analyzedInstructions": [
                {"steps": [{"step": "Toast the bread."}, {"step": "Butter it."}]}
            ],
        }

        mapped = SpoonacularRecipeProvider.map_detail(detail)

        assert mapped["instructions"] == ["Toast the bread.", "Butter it."]
