from typing import Final

MIN_DAYS: Final[int] = 1
MAX_DAYS: Final[int] = 14
DEFAULT_DAYS: Final[int] = 7

MIN_SERVINGS: Final[int] = 1
MAX_SERVINGS: Final[int] = 99

DEFAULT_CATEGORY: Final[str] = "plat"
BRUNCH: Final[str] = "brunch"
KNOWN_CATEGORIES: Final[tuple[str, ...]] = ("apero", "entree", "plat", "dessert", "boisson", "brunch")
HIDDEN_ON_GENERATOR: Final[frozenset[str]] = frozenset({"boisson", "sauce"})
# lunch/dinner categories, in display order
DAILY_ORDER: Final[tuple[str, ...]] = ("apero", "entree", "plat", "dessert")

MEALS: Final[tuple[str, ...]] = ("brunch", "lunch", "dinner")
DAILY_MEALS: Final[tuple[str, ...]] = ("lunch", "dinner")

# Assignment retry policy
MAX_ROUNDS: Final[int] = 5
MAX_FALLBACK_ROUNDS: Final[int] = 5
MAX_EMPTY_FALLBACKS: Final[int] = 2

# Keys of the persisted plan document
STATE_START_DATE: Final[str] = "startDate"
STATE_DAY_COUNT: Final[str] = "dayCount"
STATE_CATEGORIES: Final[str] = "activeCategories"
STATE_MENU_DAYS: Final[str] = "menuDays"
STATE_LOCKED_SLOTS: Final[str] = "lockedSlots"
STATE_LOCKED_DAYS: Final[str] = "lockedDays"
