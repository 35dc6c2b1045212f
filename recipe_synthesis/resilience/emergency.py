"""
Emergency recipe synthesis.

Last stage of the fallback chain. Builds a structurally valid recipe from the
request alone: no I/O, no randomness, no failure modes.
"""

from recipe_synthesis.models.domain import (
    Nutrition,
    Provenance,
    SynthesisRequest,
    SynthesisResult,
)

EMERGENCY_ORIGIN = "emergency"
EMERGENCY_TITLE = "Custom Recipe"
EMERGENCY_INGREDIENT_PLACEHOLDER = "Your choice of fresh ingredients"
EMERGENCY_PREP_TIME_MINUTES = 20
EMERGENCY_COOK_TIME_MINUTES = 30
EMERGENCY_SERVINGS = 4
EMERGENCY_NUTRITION = Nutrition(calories=350, protein=15, carbs=40, fat=12)


def _emergency_steps(request: SynthesisRequest) -> list[str]:
    subject = request.dish_name or "your dish"
    return [
        "Gather and wash all ingredients.",
        "Chop, slice or measure the ingredients as needed.",
        "Heat a pan or pot over medium heat with a little oil.",
        f"Cook the ingredients for {subject}, stirring occasionally, until done.",
        "Season to taste with salt, pepper and your favorite herbs.",
        f"Plate {subject} and serve warm.",
    ]


def synthesize_emergency_recipe(request: SynthesisRequest) -> SynthesisResult:
    """
    Build the fallback recipe for ``request``.

    Title is the dish name (or a generic one); ingredients are the request's
    own ingredients verbatim (or a single placeholder); instructions are
    generic numbered steps.
    """
    steps = _emergency_steps(request)
    return SynthesisResult(
        title=request.dish_name or EMERGENCY_TITLE,
        ingredient_list=list(request.ingredients) or [EMERGENCY_INGREDIENT_PLACEHOLDER],
        instructions="\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1)),
        prep_time_minutes=EMERGENCY_PREP_TIME_MINUTES,
        cook_time_minutes=EMERGENCY_COOK_TIME_MINUTES,
        servings=EMERGENCY_SERVINGS,
        nutrition=EMERGENCY_NUTRITION.model_copy(),
        provenance=Provenance.EMERGENCY,
        origin=EMERGENCY_ORIGIN,
    )
