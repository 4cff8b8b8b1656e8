"""Plan aggregate: start date, day count, active categories, menu days and locks.

All mutators return a new Plan; previous instances stay valid for readers.
"""
import logging
import re
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from menu.domain.LockSet import LockSet
from menu.domain.MenuDay import MenuDay
from menu.domain.Recipe import Recipe
from menu.domain.Slot import SlotKey
from menu.utilities.constants import (
    BRUNCH, DAILY_MEALS, DAILY_ORDER, DEFAULT_CATEGORY, DEFAULT_DAYS, HIDDEN_ON_GENERATOR, KNOWN_CATEGORIES,
    MAX_DAYS, MIN_DAYS, STATE_CATEGORIES, STATE_DAY_COUNT, STATE_LOCKED_DAYS, STATE_LOCKED_SLOTS,
    STATE_MENU_DAYS, STATE_START_DATE,
)
from menu.utilities.errors import InvalidSlot
from menu.utilities.validators import clamp_int

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def clean_categories(categories) -> Tuple[str, ...]:
    """Keep known, visible categories (first occurrence wins); default to ('plat',)."""
    seen: List[str] = []
    for c in categories or ():
        c = str(c).strip().lower()
        if c in HIDDEN_ON_GENERATOR or c not in KNOWN_CATEGORIES or c in seen:
            continue
        seen.append(c)
    return tuple(seen) if seen else (DEFAULT_CATEGORY,)


@dataclass(frozen=True)
class Plan:
    start_date: date
    day_count: int = DEFAULT_DAYS
    categories: Tuple[str, ...] = (DEFAULT_CATEGORY,)
    days: Tuple[MenuDay, ...] = ()
    locks: LockSet = field(default_factory=LockSet)

    def __str__(self) -> str:
        days_str = ",\n\t".join(str(day) for day in self.days)
        return f"Plan from {self.start_date.isoformat()} ({self.day_count} days):\n\t{days_str}"

    __repr__ = __str__

    # --- Categories ---------------------------------------------------------
    @property
    def has_brunch(self) -> bool:
        return BRUNCH in self.categories

    @property
    def daily_categories(self) -> Tuple[str, ...]:
        """Lunch/dinner categories in display order; 'plat' when nothing else is selected."""
        selected = {c for c in self.categories if c in DAILY_ORDER}
        if not selected and not self.has_brunch:
            selected = {DEFAULT_CATEGORY}
        return tuple(c for c in DAILY_ORDER if c in selected)

    def set_categories(self, categories: Iterable[str]) -> "Plan":
        return replace(self, categories=clean_categories(categories))

    def toggle_category(self, category: str) -> "Plan":
        if category in HIDDEN_ON_GENERATOR:
            return self
        if category in self.categories:
            remaining = [c for c in self.categories if c != category]
        else:
            remaining = list(self.categories) + [category]
        return self.set_categories(remaining)

    # --- Days ---------------------------------------------------------------
    def day(self, day_index: int) -> MenuDay:
        if not 0 <= day_index < len(self.days):
            raise InvalidSlot(f"Day {day_index} does not exist in the current plan")
        return self.days[day_index]

    def get(self, key: SlotKey) -> Optional[Recipe]:
        if not 0 <= key.day_index < len(self.days):
            return None
        return self.days[key.day_index].get(key)

    def with_days(self, days: Iterable[MenuDay]) -> "Plan":
        return replace(self, days=tuple(days))

    def with_slot(self, key: SlotKey, recipe: Optional[Recipe]) -> "Plan":
        day = self.day(key.day_index)
        if not day.has_meal(key.meal):
            raise InvalidSlot(f"Meal {key.meal} is not enabled on day {key.day_index}")
        days = list(self.days)
        days[key.day_index] = day.with_slot(key, recipe)
        return self.with_days(days)

    def resize_days(self, day_count) -> "Plan":
        '''Clamp the day count, drop days beyond it and purge their locks.'''
        count = clamp_int(day_count, MIN_DAYS, MAX_DAYS, DEFAULT_DAYS)
        return replace(self, day_count=count, days=self.days[:count], locks=self.locks.truncated(count))

    def set_start_date(self, start_date: date) -> "Plan":
        days = tuple(day.redated(start_date).normalized() for day in self.days)
        return replace(self, start_date=start_date, days=days)

    def set_meal_enabled(self, day_index: int, meal: str, enabled: bool) -> "Plan":
        '''Disabling a meal removes its slots and the locks scoped to it; enabling re-creates empty slots.'''
        if meal not in DAILY_MEALS:
            raise InvalidSlot(f"Only lunch and dinner can be toggled, not {meal!r}")
        day = self.day(day_index)
        days = list(self.days)
        days[day_index] = day.with_meal_enabled(meal, enabled, self.daily_categories)
        locks = self.locks if enabled else self.locks.without_meal(day_index, meal)
        return replace(self, days=tuple(days), locks=locks)

    def set_selected_servings(self, key: SlotKey, servings) -> "Plan":
        current = self.get(key)
        if current is None:
            return self
        return self.with_slot(key, current.placed().with_servings(servings))

    # --- Locks --------------------------------------------------------------
    def is_day_locked(self, day_index: int) -> bool:
        return self.locks.is_day_locked(day_index)

    def is_slot_locked(self, key: SlotKey) -> bool:
        return self.locks.is_slot_locked(key)

    def _check_day(self, day_index: int):
        if not 0 <= day_index < self.day_count:
            raise InvalidSlot(f"Day {day_index} is outside the {self.day_count}-day plan")

    def toggle_slot_lock(self, key: SlotKey) -> "Plan":
        self._check_day(key.day_index)
        return replace(self, locks=self.locks.toggle_slot(key))

    def toggle_day_lock(self, day_index: int) -> "Plan":
        self._check_day(day_index)
        return replace(self, locks=self.locks.toggle_day(day_index))

    def unlock_all(self) -> "Plan":
        return replace(self, locks=self.locks.cleared())

    # --- Generation support -------------------------------------------------
    def rebuild_for_generation(self) -> Tuple[MenuDay, ...]:
        """Skeleton of every day: locked slots keep their previous value, the rest are None."""
        categories = self.daily_categories
        rebuilt = []
        for day_index in range(self.day_count):
            existing = self.days[day_index] if day_index < len(self.days) else None
            day = MenuDay.empty(day_index, self.start_date, categories, self.has_brunch,
                                existing.enabled_meals if existing else None)
            if existing is not None:
                for key in list(day.slot_keys()):
                    if self.is_slot_locked(key):
                        previous = existing.get(key)
                        day = day.with_slot(key, previous.placed() if previous else None)
            rebuilt.append(day)
        return tuple(rebuilt)

    def slot_keys(self) -> List[SlotKey]:
        return [key for day in self.days for key in day.slot_keys()]

    def placed_recipes(self) -> List[Tuple[SlotKey, Recipe]]:
        return [item for day in self.days for item in day.placed()]

    def placed_recipe_ids(self, exclude_key: Optional[SlotKey] = None) -> List[str]:
        '''Ids of every placed recipe; with exclude_key, that slot's occupant id is left out everywhere.'''
        skip_id = None
        if exclude_key is not None:
            current = self.get(exclude_key)
            skip_id = current.id if current else None
        return [r.id for _, r in self.placed_recipes() if r.id and r.id != skip_id]

    # --- Persistence --------------------------------------------------------
    @staticmethod
    def from_dict(data, today: Optional[date] = None) -> "Plan":
        '''Builds a Plan from the persisted document. Each field falls back to its default on its own.'''
        d = data if isinstance(data, dict) else {}
        today = today or date.today()

        start_date = today
        raw_start = d.get(STATE_START_DATE)
        if isinstance(raw_start, str) and ISO_DATE_RE.match(raw_start):
            try:
                start_date = date.fromisoformat(raw_start)
            except ValueError:
                logger.warning("Ignoring invalid start date %r", raw_start)

        day_count = clamp_int(d.get(STATE_DAY_COUNT), MIN_DAYS, MAX_DAYS, DEFAULT_DAYS)

        raw_categories = d.get(STATE_CATEGORIES)
        categories = clean_categories(raw_categories if isinstance(raw_categories, list) else None)

        raw_days = d.get(STATE_MENU_DAYS)
        if isinstance(raw_days, dict):
            raw_days = [raw_days]
        days = []
        if isinstance(raw_days, list):
            for idx, raw_day in enumerate(raw_days[:day_count]):
                days.append(MenuDay.from_dict(raw_day, idx, start_date))

        locks = LockSet.from_dicts(d.get(STATE_LOCKED_SLOTS), d.get(STATE_LOCKED_DAYS)).truncated(day_count)
        return Plan(start_date, day_count, categories, tuple(days), locks)

    def to_dict(self):
        return {
            STATE_START_DATE: self.start_date.isoformat(),
            STATE_DAY_COUNT: self.day_count,
            STATE_CATEGORIES: list(self.categories),
            STATE_MENU_DAYS: [day.to_dict() for day in self.days],
            STATE_LOCKED_SLOTS: self.locks.slots_to_dict(),
            STATE_LOCKED_DAYS: self.locks.days_to_dict(),
        }

    def end_date(self) -> date:
        return self.start_date + timedelta(days=self.day_count - 1)
