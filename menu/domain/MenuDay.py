"""MenuDay domain entity: one day of the plan with its brunch/lunch/dinner slot maps.

Every meal is stored as a mapping category -> Optional[Recipe]; brunch uses the
single category key 'brunch'. A meal missing from `meals` is absent (disabled
or not selected), which is different from a present slot holding None (empty).
Instances are never mutated: every `with_*` method returns a new MenuDay.
"""
from dataclasses import dataclass, field, replace
from datetime import date as _date, timedelta
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from menu.domain.Recipe import Recipe
from menu.domain.Slot import SlotKey
from menu.utilities.constants import BRUNCH, DAILY_MEALS, MEALS

SlotMap = Mapping[str, Optional[Recipe]]


def _default_enabled() -> Dict[str, bool]:
    return {meal: True for meal in DAILY_MEALS}


@dataclass(frozen=True)
class MenuDay:
    day_index: int
    date: _date
    enabled_meals: Mapping[str, bool] = field(default_factory=_default_enabled)
    meals: Mapping[str, SlotMap] = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"Day {self.day_index} ({self.date.isoformat()})"]
        for meal in MEALS:
            if meal in self.meals:
                names = ", ".join(r.title if r else "-" for r in self.meals[meal].values())
                parts.append(f"{meal}: {names}")
        return " - ".join(parts)

    __repr__ = __str__

    # --- Builders -----------------------------------------------------------
    @staticmethod
    def empty(day_index: int, start_date: _date, categories: Iterable[str], with_brunch: bool,
              enabled_meals: Optional[Mapping[str, bool]] = None) -> "MenuDay":
        '''Skeleton day: brunch present iff with_brunch, enabled meals get one empty slot per category.'''
        enabled = _default_enabled()
        if enabled_meals:
            enabled.update({k: bool(v) for k, v in enabled_meals.items() if k in DAILY_MEALS})
        categories = tuple(categories)
        meals: Dict[str, SlotMap] = {}
        if with_brunch:
            meals[BRUNCH] = {BRUNCH: None}
        for meal in DAILY_MEALS:
            if enabled[meal]:
                meals[meal] = {c: None for c in categories}
        return MenuDay(day_index, start_date + timedelta(days=day_index), enabled, meals)

    # --- Accessors ----------------------------------------------------------
    @property
    def brunch(self) -> Optional[Recipe]:
        return self.meals.get(BRUNCH, {}).get(BRUNCH)

    @property
    def lunch(self) -> Optional[SlotMap]:
        return self.meals.get("lunch")

    @property
    def dinner(self) -> Optional[SlotMap]:
        return self.meals.get("dinner")

    def is_meal_enabled(self, meal: str) -> bool:
        return bool(self.enabled_meals.get(meal, True))

    def has_meal(self, meal: str) -> bool:
        return meal in self.meals

    def has_slot(self, key: SlotKey) -> bool:
        return key.category in self.meals.get(key.meal, {})

    def get(self, key: SlotKey) -> Optional[Recipe]:
        return self.meals.get(key.meal, {}).get(key.category)

    def slot_keys(self) -> Iterator[SlotKey]:
        for meal in MEALS:
            for category in self.meals.get(meal, {}):
                yield SlotKey(self.day_index, meal, category)

    def placed(self) -> Iterator[Tuple[SlotKey, Recipe]]:
        '''Yields (key, recipe) for every occupied slot.'''
        for key in self.slot_keys():
            recipe = self.get(key)
            if recipe is not None:
                yield key, recipe

    # --- Copy-on-write updates ---------------------------------------------
    def with_slot(self, key: SlotKey, recipe: Optional[Recipe]) -> "MenuDay":
        '''New day with one slot replaced. The meal must be present.'''
        if key.meal not in self.meals:
            raise KeyError(f"Meal {key.meal!r} is not present on day {self.day_index}")
        meals = dict(self.meals)
        slot_map = dict(meals[key.meal])
        slot_map[key.category] = recipe
        meals[key.meal] = slot_map
        return replace(self, meals=meals)

    def with_meal_enabled(self, meal: str, enabled: bool, categories: Iterable[str]) -> "MenuDay":
        enabled_meals = dict(self.enabled_meals)
        enabled_meals[meal] = bool(enabled)
        meals = dict(self.meals)
        if not enabled:
            meals.pop(meal, None)
        else:
            slot_map = dict(meals.get(meal) or {})
            for c in categories:
                slot_map.setdefault(c, None)
            meals[meal] = slot_map
        return replace(self, enabled_meals=enabled_meals, meals=meals)

    def redated(self, start_date: _date) -> "MenuDay":
        return replace(self, date=start_date + timedelta(days=self.day_index))

    def normalized(self) -> "MenuDay":
        '''Applies serving defaults to every placed recipe.'''
        meals = {meal: {c: (r.placed() if r is not None else None) for c, r in slot_map.items()}
                 for meal, slot_map in self.meals.items()}
        return replace(self, meals=meals)

    # --- Persistence --------------------------------------------------------
    @staticmethod
    def from_dict(data, day_index: int, start_date: _date) -> "MenuDay":
        '''Creates a MenuDay from its persisted form; unknown or broken fields fall back to empty.'''
        d = data if isinstance(data, dict) else {}
        enabled = _default_enabled()
        raw_enabled = d.get("enabledMeals")
        if isinstance(raw_enabled, dict):
            for meal in DAILY_MEALS:
                if meal in raw_enabled:
                    enabled[meal] = bool(raw_enabled[meal])
        meals: Dict[str, SlotMap] = {}
        if BRUNCH in d:
            raw_brunch = d.get(BRUNCH)
            meals[BRUNCH] = {BRUNCH: Recipe.from_dict(raw_brunch) if raw_brunch else None}
        for meal in DAILY_MEALS:
            if not enabled[meal]:
                continue
            raw_meal = d.get(meal)
            slot_map: Dict[str, Optional[Recipe]] = {}
            if isinstance(raw_meal, dict):
                for category, raw_recipe in raw_meal.items():
                    slot_map[str(category)] = Recipe.from_dict(raw_recipe) if raw_recipe else None
            meals[meal] = slot_map
        day = MenuDay(day_index, start_date + timedelta(days=day_index), enabled, meals)
        return day.normalized()

    def to_dict(self):
        d = {
            "dayIndex": self.day_index,
            "date": self.date.isoformat(),
            "enabledMeals": {meal: self.is_meal_enabled(meal) for meal in DAILY_MEALS},
        }
        for meal in MEALS:
            if meal not in self.meals:
                continue
            if meal == BRUNCH:
                recipe = self.brunch
                d[BRUNCH] = recipe.to_dict() if recipe else None
            else:
                d[meal] = {c: (r.to_dict() if r else None) for c, r in self.meals[meal].items()}
        return d
