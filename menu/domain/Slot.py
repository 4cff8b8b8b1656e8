"""Slot key: one (day, meal, category) position of the plan grid."""
from dataclasses import dataclass
from typing import Optional

from menu.utilities.constants import BRUNCH, MEALS


@dataclass(frozen=True)
class SlotKey:
    day_index: int
    meal: str
    category: str

    def __post_init__(self):
        if self.meal not in MEALS:
            raise ValueError(f"Unknown meal: {self.meal!r}")
        if self.meal == BRUNCH and self.category != BRUNCH:
            raise ValueError("brunch slots use the 'brunch' category key")

    def __str__(self) -> str:
        return self.serialize()

    @staticmethod
    def brunch(day_index: int) -> "SlotKey":
        return SlotKey(day_index, BRUNCH, BRUNCH)

    def serialize(self) -> str:
        return f"{self.day_index}|{self.meal}|{self.category}"

    @staticmethod
    def parse(raw) -> Optional["SlotKey"]:
        """Parse 'day|meal|category'; returns None for malformed keys."""
        parts = str(raw).split("|")
        if len(parts) != 3:
            return None
        day, meal, category = parts
        try:
            day_index = int(day)
        except ValueError:
            return None
        if day_index < 0:
            return None
        if meal == BRUNCH and not category:
            category = BRUNCH
        try:
            return SlotKey(day_index, meal, category)
        except ValueError:
            return None
