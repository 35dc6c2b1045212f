"""
Recipes Router

``POST /v1/recipes/generate`` - synthesize a recipe from ingredients and/or
a dish name. Provider failures never surface here: the pipeline always
returns a recipe. An empty request is rejected with HTTP 400 by the
application's RecipeSynthesisException handler.
"""

import logging

from fastapi import APIRouter, Depends

from recipe_synthesis.api.deps import get_recipe_service
from recipe_synthesis.models.requests import GenerateRecipeRequest
from recipe_synthesis.models.responses import (
    ErrorResponse,
    GeneratedRecipe,
    GenerateRecipeResponse,
)
from recipe_synthesis.services.recipes import RecipeGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/recipes", tags=["Recipes"])


@router.post(
    "/generate",
    response_model=GenerateRecipeResponse,
    responses={400: {"model": ErrorResponse}},
)
async def generate_recipe(
    body: GenerateRecipeRequest,
    service: RecipeGenerationService = Depends(get_recipe_service),
) -> GenerateRecipeResponse:
    """
    Generate a recipe.

    Raises:
        InvalidRequestError: neither ingredients nor a dish name (HTTP 400)
    """
    outcome = await service.generate(
        ingredients=body.ingredients,
        dish_name=body.dish_name,
    )
    data = GeneratedRecipe(**outcome.recipe.model_dump(), videos=outcome.videos)
    return GenerateRecipeResponse(data=data, source=outcome.source)
