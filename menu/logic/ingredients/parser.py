"""Ingredient line parser: '200 g farine' -> quantity 200, unit 'g', label 'farine'.

Best effort by design: an unparsable prefix simply stays in the label, so every
non-empty line yields a ParsedIngredientLine and nothing here raises.
"""
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from menu.logic.ingredients.normalizer import clean_spaces, is_known_unit, normalize_unit

# fraction first, otherwise '1/2' would be read as '1' followed by '/2'.
# Quantities are capped at 9 digits (6 decimals); longer numbers stay in the label.
_QUANTITY_PREFIX = re.compile(r"^(\d{1,9}\s*/\s*\d{1,9}(?!\d)|\d{1,9}(?:[.,]\d{1,6})?(?![\d.,/]))\s*(.*)$")
_FRACTION = re.compile(r"^(\d{1,9})\s*/\s*(\d{1,9})$")
_DECIMAL = re.compile(r"^\d{1,9}(?:[.,]\d{1,6})?$")
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ParsedIngredientLine:
    raw_text: str
    quantity: Optional[float]
    unit: str
    label: str

    def __str__(self) -> str:
        if self.quantity is None:
            return self.label
        unit = f"{self.unit} " if self.unit else ""
        return f"{format_quantity(self.quantity)} {unit}{self.label}"


def parse_quantity(token) -> Optional[float]:
    """'200' -> 200.0, '1,5' -> 1.5, '1/2' -> 0.5; anything else -> None."""
    raw = str(token or "").strip()
    if not raw:
        return None
    frac = _FRACTION.match(raw)
    if frac:
        a, b = int(frac.group(1)), int(frac.group(2))
        return a / b if b != 0 else None
    if _DECIMAL.match(raw):
        return float(raw.replace(",", "."))
    return None


def format_quantity(quantity: float) -> str:
    """Integers without decimals, otherwise at most 2 decimals with a comma (1.5 -> '1,5')."""
    value = float(quantity)
    if not math.isfinite(value):
        return repr(value)
    try:
        rounded = Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # beyond the decimal context precision; cents are meaningless there anyway
        return repr(value).replace(".", ",")
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return format(rounded, "f").rstrip("0").replace(".", ",")


def _label_only(raw: str) -> ParsedIngredientLine:
    return ParsedIngredientLine(raw_text=raw, quantity=None, unit="", label=raw)


def parse_ingredient_line(line) -> Optional[ParsedIngredientLine]:
    '''
    Parses one free-text ingredient line. Returns None for blank lines.
    '''
    raw = clean_spaces(line)
    if not raw:
        return None

    match = _QUANTITY_PREFIX.match(raw)
    if not match:
        return _label_only(raw)

    quantity = parse_quantity(match.group(1))
    rest = clean_spaces(match.group(2))
    if quantity is None or not rest:
        return _label_only(raw)

    tokens = rest.split(" ")
    first = tokens[0]
    if not is_known_unit(first):
        return ParsedIngredientLine(raw_text=raw, quantity=quantity, unit="", label=rest)

    label = clean_spaces(" ".join(tokens[1:]))
    if not label:
        # '2 tranches' -> no label left once the unit is removed
        return _label_only(raw)
    return ParsedIngredientLine(raw_text=raw, quantity=quantity, unit=normalize_unit(first), label=label)
