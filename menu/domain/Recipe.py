"""Recipe domain entity: read-only recipe from the lookup service, optionally placed with a serving choice."""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from menu.utilities.constants import DEFAULT_CATEGORY, MAX_SERVINGS, MIN_SERVINGS
from menu.utilities.validators import clamp_int, positive_int


@dataclass(frozen=True)
class Recipe:
    id: str
    title: str = ""
    category: str = DEFAULT_CATEGORY
    time: int = 0
    servings: Optional[int] = None
    ingredients: Tuple[str, ...] = field(default_factory=tuple)
    cover_image: str = ""
    # user choice once the recipe sits in a slot; None until placed
    selected_servings: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.title} ({self.category}) - {self.effective_servings} servings"

    __repr__ = __str__

    @property
    def base_servings(self) -> int:
        return positive_int(self.servings) or 1

    @property
    def effective_servings(self) -> int:
        return positive_int(self.selected_servings) or self.base_servings

    def placed(self) -> "Recipe":
        '''Returns the recipe with selected_servings defaulted to the base servings.'''
        selected = self.effective_servings
        if self.selected_servings == selected:
            return self
        return replace(self, selected_servings=selected)

    def with_servings(self, servings) -> "Recipe":
        '''Returns a copy with the selected servings clamped to the allowed range.'''
        selected = clamp_int(servings, MIN_SERVINGS, MAX_SERVINGS, self.base_servings)
        return replace(self, selected_servings=selected)

    @staticmethod
    def from_dict(data) -> Optional["Recipe"]:
        '''Creates a Recipe from the lookup service JSON. Returns None without a usable id.'''
        if not isinstance(data, dict):
            return None
        recipe_id = data.get("_id", data.get("id"))
        if recipe_id is None or str(recipe_id).strip() == "":
            return None
        raw_ingredients = data.get("ingredients") or []
        if isinstance(raw_ingredients, str):
            raw_ingredients = [raw_ingredients]
        ingredients = tuple(str(line) for line in raw_ingredients if line is not None) \
            if isinstance(raw_ingredients, (list, tuple)) else ()
        time = positive_int(data.get("time")) or 0
        return Recipe(
            id=str(recipe_id),
            title=str(data.get("title") or ""),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            time=time,
            servings=positive_int(data.get("servings")),
            ingredients=ingredients,
            cover_image=str(data.get("coverImage") or ""),
            selected_servings=positive_int(data.get("selectedServings")),
        )

    def to_dict(self):
        '''Converts the Recipe to the JSON shape used by the lookup service and the plan store.'''
        d = {
            "_id": self.id,
            "title": self.title,
            "category": self.category,
            "time": self.time,
            "servings": self.servings,
            "ingredients": list(self.ingredients),
            "coverImage": self.cover_image,
        }
        if self.selected_servings is not None:
            d["selectedServings"] = self.selected_servings
        return d
