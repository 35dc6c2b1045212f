"""
Providers Package - recipe and media provider adapters

- base: RecipeProvider interface
- gemini: generative (primary) recipe provider
- spoonacular: structured database (secondary) recipe provider
- youtube: best-effort cooking video lookup
- fake: scripted test double
- parsing / normalization: turning provider payloads into SynthesisResult
"""

from recipe_synthesis.providers.base import RecipeProvider
from recipe_synthesis.providers.fake import FakeRecipeProvider
from recipe_synthesis.providers.gemini import GeminiRecipeProvider
from recipe_synthesis.providers.normalization import normalize_recipe
from recipe_synthesis.providers.parsing import ParsedRecipe, ParseTier, RecipeTextParser
from recipe_synthesis.providers.spoonacular import SearchMode, SpoonacularRecipeProvider
from recipe_synthesis.providers.youtube import YouTubeMediaProvider

__all__ = [
    "RecipeProvider",
    "FakeRecipeProvider",
    "GeminiRecipeProvider",
    "SpoonacularRecipeProvider",
    "SearchMode",
    "YouTubeMediaProvider",
    "RecipeTextParser",
    "ParsedRecipe",
    "ParseTier",
    "normalize_recipe",
]
