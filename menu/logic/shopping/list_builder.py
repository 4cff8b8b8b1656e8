"""Shopping list builder.

Provides build_shopping_list(days): every ingredient line of every placed
recipe goes through parse -> normalize -> scale, then lines sharing the same
(unit, label key) are merged into one sorted list of display strings.

Recipes from different categories are merged too when their unit and label
key match (a '2 oeufs' starter and a '2 oeufs' dessert give '4 oeufs').
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from menu.domain.MenuDay import MenuDay
from menu.domain.Recipe import Recipe
from menu.logic.ingredients.normalizer import normalize_label_key, normalize_unit, strip_diacritics
from menu.logic.ingredients.parser import format_quantity, parse_ingredient_line
from menu.logic.ingredients.scaler import recipe_multiplier, scale_quantity

GroupKey = Tuple[str, str]


@dataclass
class AggregatedItem:
    unit_key: str
    label_key: str
    display_label: str
    unit: str = ""
    total_quantity: Optional[float] = None

    @property
    def key(self) -> GroupKey:
        return self.unit_key, self.label_key

    def display(self) -> str:
        if self.total_quantity is None:
            return self.display_label
        unit = f"{self.unit} " if self.unit else ""
        return f"{format_quantity(self.total_quantity)} {unit}{self.display_label}".strip()


def iter_placed_recipes(days: Iterable[MenuDay]) -> Iterator[Recipe]:
    """Brunch, then every lunch category, then every dinner category, day by day."""
    for day in days:
        if day is None:
            continue
        for _, recipe in day.placed():
            yield recipe


def aggregate_ingredients(recipes: Iterable[Recipe]) -> List[AggregatedItem]:
    """Merge scaled ingredient lines; quantity groups first, then label-only singles, in first-seen order."""
    totals: Dict[GroupKey, AggregatedItem] = {}
    singles: Dict[GroupKey, AggregatedItem] = {}

    for recipe in recipes:
        multiplier = recipe_multiplier(recipe)
        for line in recipe.ingredients:
            parsed = parse_ingredient_line(line)
            if parsed is None:
                continue
            label_key = normalize_label_key(parsed.label)
            if not label_key:
                continue
            key = (normalize_unit(parsed.unit), label_key)

            if parsed.quantity is None:
                # never summed, kept once
                if key not in singles:
                    singles[key] = AggregatedItem(key[0], label_key, parsed.label)
                continue

            scaled = scale_quantity(parsed.quantity, multiplier)
            item = totals.get(key)
            if item is None:
                totals[key] = AggregatedItem(key[0], label_key, parsed.label, parsed.unit, scaled)
            else:
                item.total_quantity += scaled

    return list(totals.values()) + list(singles.values())


def french_sort_key(text: str):
    """Accent and case insensitive first, then accents, then lowercase before uppercase (close to 'fr' collation)."""
    folded = text.casefold()
    return strip_diacritics(folded), folded, text.swapcase()


def build_shopping_list(days: Iterable[MenuDay]) -> List[str]:
    """Consolidated, sorted shopping list for every recipe placed in the given days."""
    items = aggregate_ingredients(iter_placed_recipes(days))
    lines = [item.display() for item in items]
    lines.sort(key=french_sort_key)
    return lines

__all__ = ['AggregatedItem', 'aggregate_ingredients', 'build_shopping_list', 'french_sort_key', 'iter_placed_recipes']
