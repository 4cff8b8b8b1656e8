"""Serving-based quantity scaling. No rounding here: rounding happens only when formatting."""
from typing import Optional

from menu.domain.Recipe import Recipe


def recipe_multiplier(recipe: Optional[Recipe]) -> float:
    """selected servings / base servings; base defaults to 1, selected defaults to base."""
    if recipe is None:
        return 1.0
    return recipe.effective_servings / recipe.base_servings


def scale_quantity(quantity: Optional[float], multiplier: float) -> Optional[float]:
    if quantity is None:
        return None
    return quantity * multiplier
