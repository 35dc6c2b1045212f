"""
Models Package - domain value objects and HTTP envelopes.
"""

from recipe_synthesis.models.domain import (
    Nutrition,
    Provenance,
    SynthesisRequest,
    SynthesisResult,
    VideoReference,
)
from recipe_synthesis.models.requests import GenerateRecipeRequest
from recipe_synthesis.models.responses import (
    BreakerStatusResponse,
    ErrorResponse,
    GeneratedRecipe,
    GenerateRecipeResponse,
    QuotaSnapshotResponse,
)

__all__ = [
    "Nutrition",
    "Provenance",
    "SynthesisRequest",
    "SynthesisResult",
    "VideoReference",
    "GenerateRecipeRequest",
    "GeneratedRecipe",
    "GenerateRecipeResponse",
    "ErrorResponse",
    "QuotaSnapshotResponse",
    "BreakerStatusResponse",
]
