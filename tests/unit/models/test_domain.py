"""
Tests for domain models: SynthesisRequest normalization, cache keys and
SynthesisResult invariants.
"""

import pytest
from pydantic import ValidationError

from recipe_synthesis.core.exceptions import ErrorCode, InvalidRequestError
from recipe_synthesis.models.domain import (
    Nutrition,
    Provenance,
    SynthesisRequest,
    SynthesisResult,
)


class TestSynthesisRequestValidation:
    """A request needs ingredients or a dish name."""

    def test_ingredients_only_is_valid(self) -> None:
        request = SynthesisRequest(ingredients=["eggs"])

        assert request.ingredients == ("eggs",)
        assert request.dish_name is None
        assert request.has_ingredients
        assert not request.has_dish_name

    def test_dish_name_only_is_valid(self) -> None:
        request = SynthesisRequest(dish_name="Pad Thai")

        assert request.ingredients == ()
        assert request.has_dish_name

    def test_empty_request_raises_invalid_request(self) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            SynthesisRequest()

        assert exc_info.value.error_code == ErrorCode.INVALID_REQUEST
        assert exc_info.value.field == "ingredients"

    def test_blank_inputs_raise_invalid_request(self) -> None:
        with pytest.raises(InvalidRequestError):
            SynthesisRequest(ingredients=["  ", ""], dish_name="   ")

    def test_none_ingredients_treated_as_empty(self) -> None:
        request = SynthesisRequest(ingredients=None, dish_name="Soup")

        assert request.ingredients == ()

    def test_request_is_immutable(self) -> None:
        request = SynthesisRequest(dish_name="Soup")

        with pytest.raises(ValidationError):
            request.dish_name = "Stew"


class TestIngredientNormalization:
    """Ingredients behave like an ordered set."""

    def test_entries_are_stripped(self) -> None:
        request = SynthesisRequest(ingredients=["  eggs ", "milk\n"])

        assert request.ingredients == ("eggs", "milk")

    def test_duplicates_removed_keeping_first_seen_order(self) -> None:
        request = SynthesisRequest(ingredients=["milk", "eggs", "milk", " eggs"])

        assert request.ingredients == ("milk", "eggs")

    def test_single_string_becomes_one_ingredient(self) -> None:
        request = SynthesisRequest(ingredients="tofu")

        assert request.ingredients == ("tofu",)

    def test_dish_name_is_stripped(self) -> None:
        request = SynthesisRequest(dish_name="  Pad Thai  ")

        assert request.dish_name == "Pad Thai"


class TestCacheKey:
    """Cache keys are deterministic and order independent."""

    def test_key_format(self) -> None:
        request = SynthesisRequest(ingredients=["rice", "chicken"], dish_name="Fried Rice")

        assert request.cache_key == "recipe:Fried Rice:chicken,rice"

    def test_key_ignores_ingredient_order(self) -> None:
        first = SynthesisRequest(ingredients=["tomato", "basil", "garlic"])
        second = SynthesisRequest(ingredients=["garlic", "tomato", "basil"])

        assert first.cache_key == second.cache_key

    def test_key_ignores_duplicates(self) -> None:
        first = SynthesisRequest(ingredients=["tomato", "basil"])
        second = SynthesisRequest(ingredients=["basil", "tomato", "basil"])

        assert first.cache_key == second.cache_key

    def test_key_without_dish_name(self) -> None:
        request = SynthesisRequest(ingredients=["eggs"])

        assert request.cache_key == "recipe::eggs"

    def test_key_without_ingredients(self) -> None:
        request = SynthesisRequest(dish_name="Lasagna")

        assert request.cache_key == "recipe:Lasagna:"

    def test_different_dish_names_give_different_keys(self) -> None:
        first = SynthesisRequest(ingredients=["eggs"], dish_name="Omelette")
        second = SynthesisRequest(ingredients=["eggs"], dish_name="Frittata")

        assert first.cache_key != second.cache_key


class TestSynthesisResult:
    """SynthesisResult field constraints and provenance tagging."""

    def _result(self, **overrides):
        fields = dict(
            title="Omelette",
            ingredient_list=["eggs"],
            instructions="1. Whisk.\n2. Cook.",
            prep_time_minutes=5,
            cook_time_minutes=5,
            servings=1,
            nutrition=Nutrition(calories=200, protein=12, carbs=1, fat=15),
            provenance=Provenance.PRIMARY_PROVIDER,
            origin="gemini",
        )
        fields.update(overrides)
        return SynthesisResult(**fields)

    def test_valid_result(self) -> None:
        result = self._result()

        assert result.title == "Omelette"
        assert result.image_url == ""
        assert result.source_url == ""

    def test_empty_ingredient_list_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._result(ingredient_list=[])

    def test_empty_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._result(title="")

    def test_zero_servings_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._result(servings=0)

    def test_negative_times_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._result(prep_time_minutes=-1)

    def test_with_provenance_returns_tagged_copy(self) -> None:
        result = self._result()

        cached = result.with_provenance(Provenance.CACHE)

        assert cached.provenance == Provenance.CACHE
        assert cached.origin == "gemini"
        assert result.provenance == Provenance.PRIMARY_PROVIDER

    def test_json_round_trip_preserves_fields(self) -> None:
        result = self._result(image_url="https://img.example/1.jpg")

        restored = SynthesisResult.model_validate_json(result.model_dump_json())

        assert restored == result
