"""
Tests for RecipeTextParser - tiered extraction from generative output.
"""

import pytest

from recipe_synthesis.core.exceptions import FailureReason, ProviderMalformedError
from recipe_synthesis.providers.parsing import ParseTier, RecipeTextParser


@pytest.fixture
def parser() -> RecipeTextParser:
    return RecipeTextParser(provider="gemini")


class TestJsonTiers:

    def test_fenced_json_block(self, parser) -> None:
        text = 'Here is your recipe:\n```json\n{"name": "Omelette", "servings": 1}\n```\nEnjoy!'

        parsed = parser.parse(text)

        assert parsed.tier == ParseTier.FENCED_BLOCK
        assert parsed.payload == {"name": "Omelette", "servings": 1}

    def test_unlabelled_fence(self, parser) -> None:
        text = '```\n{"name": "Omelette"}\n```'

        assert parser.parse(text).tier == ParseTier.FENCED_BLOCK

    def test_brace_span_inside_prose(self, parser) -> None:
        text = 'Sure! {"name": "Pancakes", "ingredients": ["flour", "milk"]} Hope you like it.'

        parsed = parser.parse(text)

        assert parsed.tier == ParseTier.BRACE_SPAN
        assert parsed.payload["ingredients"] == ["flour", "milk"]

    def test_bare_json(self, parser) -> None:
        parsed = parser.parse('{"name": "Toast"}')

        assert parsed.payload == {"name": "Toast"}

    def test_invalid_fence_falls_through_to_brace_span(self, parser) -> None:
        text = '```json\nnot json at all\n```\nAlso: {"name": "Soup"}'

        parsed = parser.parse(text)

        assert parsed.tier == ParseTier.BRACE_SPAN
        assert parsed.payload == {"name": "Soup"}

    def test_json_array_is_not_a_recipe(self, parser) -> None:
        text = '```json\n["a", "b"]\n```'

        parsed = parser.parse(text)

        assert parsed.tier == ParseTier.FREE_TEXT


class TestFreeTextTier:

    def test_sections_extracted(self, parser) -> None:
        text = (
            "Garlic Butter Pasta\n"
            "\n"
            "Ingredients:\n"
            "- 200g spaghetti\n"
            "- 3 cloves garlic\n"
            "2 tbsp butter\n"
            "\n"
            "Instructions:\n"
            "1. Boil the pasta.\n"
            "2. Melt butter with garlic.\n"
            "3. Toss together.\n"
        )

        parsed = parser.parse(text)

        assert parsed.tier == ParseTier.FREE_TEXT
        assert parsed.payload["name"] == "Garlic Butter Pasta"
        assert parsed.payload["ingredients"] == ["200g spaghetti", "3 cloves garlic", "2 tbsp butter"]
        assert parsed.payload["instructions"].splitlines() == [
            "1. Boil the pasta.",
            "2. Melt butter with garlic.",
            "3. Toss together.",
        ]

    def test_markdown_headings(self, parser) -> None:
        text = (
            "## **Tomato Soup**\n"
            "### Ingredients\n"
            "* 4 tomatoes\n"
            "### Directions\n"
            "Simmer everything for 20 minutes.\n"
        )

        parsed = parser.parse(text)

        assert parsed.payload["name"] == "Tomato Soup"
        assert parsed.payload["ingredients"] == ["4 tomatoes"]
        assert parsed.payload["instructions"] == "Simmer everything for 20 minutes."

    def test_prose_without_sections_becomes_instructions(self, parser) -> None:
        text = (
            "Mix the flour, sugar and eggs into a smooth batter, then bake it "
            "for twenty five minutes until golden."
        )

        parsed = parser.parse(text)

        assert parsed.tier == ParseTier.FREE_TEXT
        assert parsed.payload["instructions"] == text
        assert "ingredients" not in parsed.payload


class TestMalformed:

    @pytest.mark.parametrize("text", ["", "   ", "\n\n"])
    def test_empty_text(self, parser, text) -> None:
        with pytest.raises(ProviderMalformedError) as exc_info:
            parser.parse(text)

        assert exc_info.value.provider == "gemini"
        assert exc_info.value.reason == FailureReason.MALFORMED

    def test_short_refusal(self, parser) -> None:
        with pytest.raises(ProviderMalformedError):
            parser.parse("I can't help.")
