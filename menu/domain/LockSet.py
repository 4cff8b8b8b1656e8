"""LockSet value object: locked slots plus locked days. Every operation returns a new LockSet."""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet

from menu.domain.Slot import SlotKey


@dataclass(frozen=True)
class LockSet:
    slots: FrozenSet[SlotKey] = field(default_factory=frozenset)
    days: FrozenSet[int] = field(default_factory=frozenset)

    def is_day_locked(self, day_index: int) -> bool:
        return day_index in self.days

    def is_slot_locked(self, key: SlotKey) -> bool:
        # a locked day covers every slot in it; an empty slot can be locked too
        return self.is_day_locked(key.day_index) or key in self.slots

    def toggle_slot(self, key: SlotKey) -> "LockSet":
        slots = self.slots - {key} if key in self.slots else self.slots | {key}
        return LockSet(frozenset(slots), self.days)

    def toggle_day(self, day_index: int) -> "LockSet":
        days = self.days - {day_index} if day_index in self.days else self.days | {day_index}
        return LockSet(self.slots, frozenset(days))

    def cleared(self) -> "LockSet":
        return LockSet()

    def without_meal(self, day_index: int, meal: str) -> "LockSet":
        '''Drops slot locks scoped to one meal of one day (day lock is kept).'''
        slots = frozenset(k for k in self.slots if not (k.day_index == day_index and k.meal == meal))
        return LockSet(slots, self.days)

    def truncated(self, day_count: int) -> "LockSet":
        '''Drops every lock referencing a day_index >= day_count.'''
        return LockSet(
            frozenset(k for k in self.slots if k.day_index < day_count),
            frozenset(d for d in self.days if d < day_count),
        )

    def slots_to_dict(self) -> Dict[str, bool]:
        return {k.serialize(): True for k in sorted(self.slots, key=lambda k: (k.day_index, k.meal, k.category))}

    def days_to_dict(self) -> Dict[str, bool]:
        return {str(d): True for d in sorted(self.days)}

    @staticmethod
    def from_dicts(slots, days) -> "LockSet":
        '''Builds a LockSet from the persisted mappings, ignoring malformed entries.'''
        slot_keys = set()
        if isinstance(slots, dict):
            for raw, flag in slots.items():
                key = SlotKey.parse(raw)
                if key is not None and flag:
                    slot_keys.add(key)
        day_indexes = set()
        if isinstance(days, dict):
            for raw, flag in days.items():
                try:
                    day_index = int(raw)
                except (TypeError, ValueError):
                    continue
                if day_index >= 0 and flag:
                    day_indexes.add(day_index)
        return LockSet(frozenset(slot_keys), frozenset(day_indexes))
