"""Plan generation: fill every unlocked slot, or re-roll a single slot.

The generator works on a rebuilt copy of the days and only hands back a new
Plan once every category has been processed, so a lookup failure midway never
exposes a half-filled plan. The store (when given) is written after success.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from menu.domain.LockSet import LockSet
from menu.domain.MenuDay import MenuDay
from menu.domain.Plan import Plan
from menu.domain.Slot import SlotKey
from menu.infra.Plan_Repository import PlanStore
from menu.infra.Recipe_Lookup import RecipeLookupService
from menu.logic.generation.assignment import assign
from menu.utilities.constants import BRUNCH, DAILY_MEALS, MAX_FALLBACK_ROUNDS, MAX_ROUNDS
from menu.utilities.errors import GenerationFailed, InvalidSlot, RecipeLookupError

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    plan: Plan
    filled: int = 0
    shortfall: Dict[str, int] = field(default_factory=dict)
    round_trips: int = 0


def generation_targets(days: Sequence[MenuDay], daily_categories: Sequence[str],
                       with_brunch: bool, locks: Optional[LockSet] = None) -> Dict[str, List[SlotKey]]:
    """Empty unlocked slots per category: brunch first, then daily categories; day ascending, lunch before dinner."""
    locks = locks or LockSet()

    def wanted(day: MenuDay, key: SlotKey) -> bool:
        return day.has_slot(key) and day.get(key) is None and not locks.is_slot_locked(key)

    targets: Dict[str, List[SlotKey]] = {}
    if with_brunch:
        targets[BRUNCH] = [SlotKey.brunch(day.day_index) for day in days
                           if wanted(day, SlotKey.brunch(day.day_index))]
    for category in daily_categories:
        targets[category] = [SlotKey(day.day_index, meal, category)
                             for day in days for meal in DAILY_MEALS
                             if wanted(day, SlotKey(day.day_index, meal, category))]
    return targets


class PlanGenerator:
    def __init__(self, lookup: RecipeLookupService, store: Optional[PlanStore] = None, *,
                 max_rounds: int = MAX_ROUNDS, fallback_rounds: int = MAX_FALLBACK_ROUNDS):
        self.lookup = lookup
        self.store = store
        self.max_rounds = max_rounds
        self.fallback_rounds = fallback_rounds

    def _persist(self, plan: Plan) -> None:
        if self.store is not None:
            self.store.save(plan)

    def generate(self, plan: Plan) -> GenerationResult:
        '''
        Fills every unlocked slot of the plan. Locked slots keep their recipe;
        ids already placed (locked) or picked for an earlier category are excluded
        from later requests as long as the pool allows it.
        '''
        days = list(plan.rebuild_for_generation())
        exclude: Set[str] = {r.id for day in days for _, r in day.placed() if r.id}
        result = GenerationResult(plan=plan)
        logger.info("Generating %d days for categories %s (%d ids locked)",
                    len(days), ",".join(plan.categories), len(exclude))

        targets = generation_targets(days, plan.daily_categories, plan.has_brunch, plan.locks)
        for category, keys in targets.items():
            if not keys:
                continue
            try:
                assigned = assign(self.lookup, keys, category, frozenset(exclude),
                                  max_rounds=self.max_rounds, fallback_rounds=self.fallback_rounds)
            except RecipeLookupError as e:
                logger.error("Generation failed on category %s: %s", category, e)
                raise GenerationFailed() from e
            for key, recipe in assigned.assignments.items():
                days[key.day_index] = days[key.day_index].with_slot(key, recipe)
            exclude |= assigned.picked_ids
            result.round_trips += assigned.round_trips
            result.filled += len(keys) - assigned.shortfall
            if assigned.shortfall:
                result.shortfall[category] = assigned.shortfall

        result.plan = plan.with_days(days)
        logger.info("Generation done: %d slots filled, shortfall %s", result.filled, result.shortfall or "none")
        self._persist(result.plan)
        return result

    def regenerate_slot(self, plan: Plan, key: SlotKey) -> Plan:
        '''
        Replaces the recipe of one slot. Locked slots and disabled meals are left alone.
        '''
        if plan.is_slot_locked(key):
            logger.info("Slot %s is locked; not regenerating", key)
            return plan
        day = plan.day(key.day_index)
        if not day.has_meal(key.meal):
            logger.info("Meal %s is disabled on day %d; not regenerating", key.meal, key.day_index)
            return plan
        if not day.has_slot(key):
            raise InvalidSlot(f"Category {key.category} is not part of {key.meal} on day {key.day_index}")

        exclude = frozenset(plan.placed_recipe_ids(exclude_key=key))
        try:
            assigned = assign(self.lookup, [key], key.category, exclude, max_rounds=1, fallback_rounds=1)
        except RecipeLookupError as e:
            logger.error("Regeneration of %s failed: %s", key, e)
            raise GenerationFailed("Impossible de regénérer cette recette.") from e

        new_plan = plan.with_slot(key, assigned.assignments.get(key))
        self._persist(new_plan)
        return new_plan
