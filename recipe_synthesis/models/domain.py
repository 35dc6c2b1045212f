"""
Domain Models - synthesis request, result and supporting value objects.

These are internal value objects shared by the cache, the provider adapters
and the FallbackOrchestrator. HTTP request/response envelopes live in
requests.py and responses.py.

Pattern: Domain models as value objects (Pydantic, frozen where immutable)
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from recipe_synthesis.core.exceptions import InvalidRequestError


RECIPE_KEY_PREFIX = "recipe"


class Provenance(str, Enum):
    """Which stage of the synthesis pipeline produced a result."""

    CACHE = "CACHE"
    PRIMARY_PROVIDER = "PRIMARY_PROVIDER"
    SECONDARY_PROVIDER = "SECONDARY_PROVIDER"
    EMERGENCY = "EMERGENCY"


# =============================================================================
# SynthesisRequest
# =============================================================================


class SynthesisRequest(BaseModel):
    """
    Immutable synthesis request.

    Ingredients are an ordered set: entries are stripped, blanks dropped and
    duplicates removed while keeping first-seen order. A blank dish name is
    treated as absent.

    Raises:
        InvalidRequestError: when neither ingredients nor a dish name remain.
    """

    model_config = ConfigDict(frozen=True)

    ingredients: tuple[str, ...] = ()
    dish_name: Optional[str] = None

    @field_validator("ingredients", mode="before")
    @classmethod
    def normalize_ingredients(cls, v: Any) -> tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        seen: dict[str, None] = {}
        for item in v:
            cleaned = str(item).strip()
            if cleaned:
                seen.setdefault(cleaned, None)
        return tuple(seen)

    @field_validator("dish_name", mode="before")
    @classmethod
    def normalize_dish_name(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        cleaned = str(v).strip()
        return cleaned or None

    @model_validator(mode="after")
    def require_some_input(self) -> "SynthesisRequest":
        if not self.ingredients and not self.dish_name:
            raise InvalidRequestError(
                "Please provide either ingredients or a dish name",
                field="ingredients",
            )
        return self

    @property
    def has_ingredients(self) -> bool:
        return bool(self.ingredients)

    @property
    def has_dish_name(self) -> bool:
        return bool(self.dish_name)

    @property
    def cache_key(self) -> str:
        """
        Deterministic cache key.

        Format: recipe:<dish name>:<sorted, comma-joined ingredients>.
        Input order of the ingredients never changes the key.
        """
        dish = self.dish_name or ""
        joined = ",".join(sorted(self.ingredients))
        return f"{RECIPE_KEY_PREFIX}:{dish}:{joined}"


# =============================================================================
# SynthesisResult
# =============================================================================


class Nutrition(BaseModel):
    """Per-serving nutrition facts; grams for macros."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


class SynthesisResult(BaseModel):
    """
    Canonical recipe produced by any stage of the pipeline.

    Every field carries a value so that provider, cache and emergency results
    are interchangeable to callers.

    Attributes:
        origin: Identifier of the stage that generated the content
            ("gemini", "spoonacular", "emergency"). Preserved through the cache.
        provenance: Stage that served this particular response.
    """

    title: str = Field(..., min_length=1)
    ingredient_list: list[str] = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1)
    prep_time_minutes: int = Field(..., ge=0)
    cook_time_minutes: int = Field(..., ge=0)
    servings: int = Field(..., ge=1)
    nutrition: Nutrition
    provenance: Provenance
    origin: str = Field(..., min_length=1)
    image_url: str = ""
    source_url: str = ""
    source_id: str = ""

    def with_provenance(self, provenance: Provenance) -> "SynthesisResult":
        """Return a copy tagged with a different provenance."""
        return self.model_copy(update={"provenance": provenance})


# =============================================================================
# Media lookup
# =============================================================================


class VideoReference(BaseModel):
    """A cooking video returned by the media-lookup provider."""

    video_id: str
    title: str
    thumbnail: str = ""
    channel_title: str = ""
    url: str
