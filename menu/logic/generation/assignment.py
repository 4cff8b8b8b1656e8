"""Randomized assignment of recipes to slots of one category.

pick_recipes_with_retries is a bounded loop over the lookup service:
  1. up to `max_rounds` rounds excluding every id already used or picked,
     stopping at the first empty answer;
  2. while still short, rounds without any exclusion (duplicates accepted),
     stopping after `max_empty` empty answers in a row or `fallback_rounds`
     rounds, whichever comes first.
Round trips are sequential: each round's exclusions depend on earlier rounds.
"""
import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Optional, Sequence, Set

from menu.domain.Recipe import Recipe
from menu.domain.Slot import SlotKey
from menu.infra.Recipe_Lookup import RecipeLookupService
from menu.utilities.constants import MAX_EMPTY_FALLBACKS, MAX_FALLBACK_ROUNDS, MAX_ROUNDS

logger = logging.getLogger(__name__)


@dataclass
class PickResult:
    recipes: List[Recipe]
    requested: int
    round_trips: int = 0

    @property
    def shortfall(self) -> int:
        return max(self.requested - len(self.recipes), 0)


@dataclass
class AssignmentResult:
    category: str
    assignments: Dict[SlotKey, Optional[Recipe]] = field(default_factory=dict)
    round_trips: int = 0

    @property
    def picked_ids(self) -> Set[str]:
        return {r.id for r in self.assignments.values() if r is not None and r.id}

    @property
    def shortfall(self) -> int:
        return sum(1 for r in self.assignments.values() if r is None)


def pick_recipes_with_retries(lookup: RecipeLookupService, count: int, category: str,
                              exclude_ids: Iterable[str] = (), *, max_rounds: int = MAX_ROUNDS,
                              fallback_rounds: int = MAX_FALLBACK_ROUNDS,
                              max_empty: int = MAX_EMPTY_FALLBACKS) -> PickResult:
    result = PickResult(recipes=[], requested=max(count, 0))
    running: Set[str] = {i for i in exclude_ids if i}

    for _ in range(max_rounds):
        remaining = result.requested - len(result.recipes)
        if remaining <= 0:
            break
        batch = lookup.fetch_random(remaining, category, frozenset(running))
        result.round_trips += 1
        if not batch:
            break
        batch = batch[:remaining]
        result.recipes.extend(batch)
        running.update(r.id for r in batch if r.id)

    empty_streak = 0
    for _ in range(fallback_rounds):
        remaining = result.requested - len(result.recipes)
        if remaining <= 0:
            break
        batch = lookup.fetch_random(remaining, category, frozenset())
        result.round_trips += 1
        if not batch:
            empty_streak += 1
            if empty_streak >= max_empty:
                break
            continue
        empty_streak = 0
        result.recipes.extend(batch[:remaining])

    if result.shortfall:
        logger.info("Category %s: %d/%d recipes found after %d round trips",
                    category, len(result.recipes), result.requested, result.round_trips)
    return result


def assign(lookup: RecipeLookupService, targets: Sequence[SlotKey], category: str,
           already_used_ids: AbstractSet[str] = frozenset(), **policy) -> AssignmentResult:
    """Fill `targets` in order with recipes of `category`; slots left over stay None."""
    result = AssignmentResult(category=category)
    if not targets:
        return result
    picked = pick_recipes_with_retries(lookup, len(targets), category, already_used_ids, **policy)
    result.round_trips = picked.round_trips
    for idx, key in enumerate(targets):
        recipe = picked.recipes[idx] if idx < len(picked.recipes) else None
        result.assignments[key] = recipe.placed() if recipe is not None else None
    return result
