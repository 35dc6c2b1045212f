"""
Response Models - HTTP response envelopes.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from recipe_synthesis.models.domain import SynthesisResult, VideoReference


class GeneratedRecipe(SynthesisResult):
    """A synthesis result enriched with related cooking videos."""

    videos: list[VideoReference] = Field(default_factory=list)


class GenerateRecipeResponse(BaseModel):
    """
    Response of POST /v1/recipes/generate.

    Attributes:
        success: Always True for a 200 response.
        data: The recipe.
        source: "cache" for cache hits, otherwise the generating stage
            ("gemini", "spoonacular", "emergency").
    """

    success: bool = True
    data: GeneratedRecipe
    source: str


class ErrorResponse(BaseModel):
    """Error body for rejected requests."""

    success: bool = False
    error_code: str
    message: str


class QuotaSnapshotResponse(BaseModel):
    """Current primary-provider quota window."""

    count: int
    limit: int
    window_start: date
    limited: bool
    remaining: int


class BreakerStatusResponse(BaseModel):
    """State of one provider's breaker flag."""

    provider_id: str
    open: bool
    reset: Optional[bool] = None
