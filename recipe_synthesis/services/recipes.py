"""
Recipe Generation Service

Application-level use case behind ``POST /v1/recipes/generate``: runs the
fallback chain, then decorates the recipe with cooking videos. Videos are
looked up per response and are never part of the cached result.
"""

import logging
from typing import Iterable, Optional

from pydantic import BaseModel

from recipe_synthesis.models.domain import Provenance, SynthesisResult, VideoReference
from recipe_synthesis.providers.youtube import YouTubeMediaProvider
from recipe_synthesis.resilience.orchestrator import FallbackOrchestrator

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
VIDEO_QUERY_SUFFIX = "recipe cooking"


class GenerationOutcome(BaseModel):
    """A synthesized recipe plus its response decorations."""

    recipe: SynthesisResult
    videos: list[VideoReference] = []

    @property
    def source(self) -> str:
        """Wire label: "cache" or the origin that generated the content."""
        if self.recipe.provenance == Provenance.CACHE:
            return SOURCE_CACHE
        return self.recipe.origin


class RecipeGenerationService:
    """
    Synthesis plus media enrichment.

    Emergency recipes are generic, so no video search is spent on them.
    """

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        media: Optional[YouTubeMediaProvider] = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._media = media

    async def generate(
        self,
        ingredients: Optional[Iterable[str]] = None,
        dish_name: Optional[str] = None,
    ) -> GenerationOutcome:
        """
        Produce a recipe and related videos.

        Raises:
            InvalidRequestError: If neither input carries content
        """
        recipe = await self._orchestrator.synthesize(
            ingredients=ingredients, dish_name=dish_name
        )

        videos: list[VideoReference] = []
        if self._media is not None and recipe.provenance != Provenance.EMERGENCY:
            videos = await self._media.find_videos(f"{recipe.title} {VIDEO_QUERY_SUFFIX}")
            logger.debug(f"Attached {len(videos)} videos to '{recipe.title}'")

        return GenerationOutcome(recipe=recipe, videos=videos)
