"""
API Dependencies

FastAPI dependency functions for the API layer. Long-lived collaborators
(cache, quota governor, generation service) are built once in the
application lifespan and stored on ``app.state``; these functions hand them
to route handlers. Tests replace them through ``app.dependency_overrides``.
"""

from fastapi import Request

from recipe_synthesis.services.cache import TimedCache
from recipe_synthesis.services.quota import QuotaGovernor
from recipe_synthesis.services.recipes import RecipeGenerationService


def get_cache(request: Request) -> TimedCache:
    return request.app.state.cache


def get_quota_governor(request: Request) -> QuotaGovernor:
    return request.app.state.quota


def get_recipe_service(request: Request) -> RecipeGenerationService:
    return request.app.state.recipe_service
