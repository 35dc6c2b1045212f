"""
Recipe payload normalization.

Turns a loosely-structured provider payload into a SynthesisResult,
substituting defaults for every missing or unusable field. Accepts the
field spellings seen in practice (``name``/``title``, ``nutrition``/
``nutritionFacts``, ``fat``/``fats``, numbers as strings with units).
"""

import math
import re
from typing import Any, Optional

from recipe_synthesis.models.domain import (
    Nutrition,
    Provenance,
    SynthesisRequest,
    SynthesisResult,
)

DEFAULT_TITLE = "Custom Recipe"
DEFAULT_INGREDIENT = "Ingredients not specified"
DEFAULT_INSTRUCTIONS = "No instructions provided"
DEFAULT_PREP_TIME_MINUTES = 30
DEFAULT_COOK_TIME_MINUTES = 30
DEFAULT_SERVINGS = 4
DEFAULT_NUTRITION = Nutrition(calories=400, protein=20, carbs=30, fat=15)

_NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")


def coerce_number(value: Any) -> Optional[float]:
    """
    Read a finite, non-negative number from ``value``.

    Strings such as ``"25 minutes"`` or ``"12g"`` yield their first number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        match = _NUMBER_PATTERN.search(value)
        value = match.group() if match else None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def coerce_int(value: Any, default: int, minimum: int = 0) -> int:
    number = coerce_number(value)
    if number is None or number < minimum:
        return default
    return int(round(number))


def _first(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value not in (None, "", [], {}):
            return value
    return None


def _ingredient_text(item: Any) -> str:
    if isinstance(item, dict):
        text = _first(item, "original", "name", "ingredient", "text")
        amount = item.get("amount") or item.get("quantity")
        if text and amount and "original" not in item:
            return f"{amount} {text}".strip()
        return str(text or "").strip()
    return str(item).strip()


def normalize_ingredients(raw: Any, request: SynthesisRequest) -> list[str]:
    """Provider ingredients, else the request's, else a placeholder."""
    items: list[str] = []
    if isinstance(raw, str):
        raw = [part for part in re.split(r"[\n,]", raw)]
    if isinstance(raw, (list, tuple)):
        items = [text for text in (_ingredient_text(i) for i in raw) if text]
    if items:
        return items
    if request.ingredients:
        return list(request.ingredients)
    return [DEFAULT_INGREDIENT]


def normalize_instructions(raw: Any) -> str:
    if isinstance(raw, (list, tuple)):
        steps = [str(_first(s, "step", "text") if isinstance(s, dict) else s).strip() for s in raw]
        steps = [s for s in steps if s and s != "None"]
        return "\n".join(f"{i}. {s}" for i, s in enumerate(steps, start=1)) or DEFAULT_INSTRUCTIONS
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return DEFAULT_INSTRUCTIONS


def normalize_nutrition(raw: Any, defaults: Nutrition = DEFAULT_NUTRITION) -> Nutrition:
    if not isinstance(raw, dict):
        return defaults.model_copy()

    def pick(default: float, *keys: str) -> float:
        number = coerce_number(_first(raw, *keys))
        return default if number is None else number

    return Nutrition(
        calories=pick(defaults.calories, "calories", "kcal"),
        protein=pick(defaults.protein, "protein"),
        carbs=pick(defaults.carbs, "carbs", "carbohydrates"),
        fat=pick(defaults.fat, "fat", "fats"),
    )


def normalize_recipe(
    payload: dict[str, Any],
    request: SynthesisRequest,
    provenance: Provenance,
    origin: str,
) -> SynthesisResult:
    """
    Build a SynthesisResult from a provider payload.

    Args:
        payload: Raw fields from the provider
        request: The originating request (fallback title and ingredients)
        provenance: Stage tag for the result
        origin: Provider identifier

    Returns:
        SynthesisResult with every field populated
    """
    title = _first(payload, "name", "title", "recipeName")
    title = str(title).strip() if title else ""

    return SynthesisResult(
        title=title or request.dish_name or DEFAULT_TITLE,
        ingredient_list=normalize_ingredients(_first(payload, "ingredients", "ingredientList"), request),
        instructions=normalize_instructions(_first(payload, "instructions", "steps", "method")),
        prep_time_minutes=coerce_int(
            _first(payload, "prepTime", "prep_time", "prepTimeMinutes"), DEFAULT_PREP_TIME_MINUTES
        ),
        cook_time_minutes=coerce_int(
            _first(payload, "cookTime", "cook_time", "cookTimeMinutes"), DEFAULT_COOK_TIME_MINUTES
        ),
        servings=coerce_int(payload.get("servings"), DEFAULT_SERVINGS, minimum=1),
        nutrition=normalize_nutrition(_first(payload, "nutrition", "nutritionFacts")),
        provenance=provenance,
        origin=origin,
        image_url=str(_first(payload, "image", "imageUrl") or ""),
        source_url=str(_first(payload, "sourceUrl", "source_url") or ""),
        source_id=str(_first(payload, "sourceId", "id") or ""),
    )
