"""
Request Models - HTTP request envelopes.

The wire format keeps the camelCase field names used by the consumer frontend
(``dishName``); Python code uses snake_case.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerateRecipeRequest(BaseModel):
    """
    Body of POST /v1/recipes/generate.

    Both fields are optional at the schema level; the "at least one" rule is
    enforced by SynthesisRequest inside the pipeline, so an empty body surfaces
    as an InvalidRequestError (HTTP 400) rather than a schema error (HTTP 422).
    """

    model_config = ConfigDict(populate_by_name=True)

    ingredients: Optional[list[str]] = Field(
        default=None, description="Available ingredients, any order"
    )
    dish_name: Optional[str] = Field(
        default=None, alias="dishName", description="Dish to cook"
    )
