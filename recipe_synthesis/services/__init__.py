"""
Services Package - cache and cost controls.

Note: Import RecipeGenerationService directly from recipe_synthesis.services.recipes
to avoid circular imports.
"""

from recipe_synthesis.services.cache import CacheHealth, TimedCache
from recipe_synthesis.services.quota import QuotaGovernor, QuotaSnapshot, breaker_key

__all__ = [
    "CacheHealth",
    "TimedCache",
    "QuotaGovernor",
    "QuotaSnapshot",
    "breaker_key",
]
