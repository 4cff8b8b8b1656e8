"""
Input validation schemas using Pydantic, plus small numeric coercion helpers.
"""
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from menu.utilities.constants import BRUNCH, MAX_DAYS, MAX_SERVINGS, MIN_DAYS, MIN_SERVINGS


def clamp_int(value: Any, low: int, high: int, fallback: int) -> int:
    """Coerce value to an int within [low, high]; fallback when it is not numeric."""
    if isinstance(value, bool):
        return fallback
    try:
        n = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return fallback
    return min(max(n, low), high)


def positive_int(value: Any) -> Optional[int]:
    """Return value as a positive int, or None when it is missing or not > 0."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        n = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return n if n > 0 else None


class SlotInput(BaseModel):
    """Schema identifying one slot of the plan grid."""
    day_index: int = Field(..., ge=0, lt=MAX_DAYS)
    meal: str = Field(..., pattern=r'^(brunch|lunch|dinner)$')
    category: Optional[str] = None

    @field_validator('category')
    @classmethod
    def strip_category(cls, v):
        """Remove whitespace and lowercase the category key."""
        if isinstance(v, str):
            v = v.strip().lower()
        return v or None

    @model_validator(mode='after')
    def check_category(self):
        if self.meal == BRUNCH:
            self.category = BRUNCH
        elif not self.category:
            raise ValueError('category is required for lunch and dinner slots')
        return self


class DayInput(BaseModel):
    """Schema for day-level operations (day lock)."""
    day_index: int = Field(..., ge=0, lt=MAX_DAYS)


class MealToggleInput(BaseModel):
    """Schema for enabling/disabling lunch or dinner on one day."""
    day_index: int = Field(..., ge=0, lt=MAX_DAYS)
    meal: str = Field(..., pattern=r'^(lunch|dinner)$')
    enabled: bool


class ServingsInput(SlotInput):
    """Schema for a serving count change on a placed recipe."""
    servings: int = Field(..., ge=MIN_SERVINGS, le=MAX_SERVINGS)


class SettingsInput(BaseModel):
    """Schema for plan settings; every field is optional."""
    start_date: Optional[date] = None
    day_count: Optional[int] = Field(None, ge=MIN_DAYS, le=MAX_DAYS)
    categories: Optional[List[str]] = None

    @field_validator('categories')
    @classmethod
    def clean_categories(cls, v):
        """Drop empty entries, normalize case."""
        if v is None:
            return v
        return [c.strip().lower() for c in v if c and c.strip()]
