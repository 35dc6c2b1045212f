"""
Tests for the HTTP request/response envelopes.
"""

from recipe_synthesis.models.requests import GenerateRecipeRequest
from recipe_synthesis.models.responses import GeneratedRecipe, GenerateRecipeResponse


class TestGenerateRecipeRequest:

    def test_accepts_camel_case_dish_name(self) -> None:
        body = GenerateRecipeRequest.model_validate({"dishName": "Tacos"})

        assert body.dish_name == "Tacos"

    def test_accepts_snake_case_dish_name(self) -> None:
        body = GenerateRecipeRequest.model_validate({"dish_name": "Tacos"})

        assert body.dish_name == "Tacos"

    def test_empty_body_is_schema_valid(self) -> None:
        body = GenerateRecipeRequest.model_validate({})

        assert body.ingredients is None
        assert body.dish_name is None


class TestGenerateRecipeResponse:

    def test_wraps_recipe_with_videos(self, sample_result) -> None:
        data = GeneratedRecipe(**sample_result.model_dump(), videos=[])

        response = GenerateRecipeResponse(data=data, source="gemini")

        dumped = response.model_dump()
        assert dumped["success"] is True
        assert dumped["source"] == "gemini"
        assert dumped["data"]["title"] == "Chicken Fried Rice"
        assert dumped["data"]["videos"] == []
