"""Unit and label normalization for French ingredient lines.

Keys produced here are only used to group equivalent ingredients; the text
originally written in the recipe is what gets displayed.
"""
import re
import unicodedata
from typing import Dict, Final

# Lookup keys are lowercase, diacritic-free, without '(' ')' '.'
UNIT_ALIASES: Final[Dict[str, str]] = {
    # mass
    "g": "g",
    "gr": "g",
    "gramme": "g",
    "grammes": "g",
    "kg": "kg",
    "kilo": "kg",
    "kilos": "kg",
    # volume
    "ml": "ml",
    "cl": "cl",
    "l": "l",
    "litre": "l",
    "litres": "l",
    # pieces
    "piece": "pc",
    "pieces": "pc",
    "pc": "pc",
    "pce": "pc",
    # spoons
    "c": "c",
    "cas": "càs",
    "cuillere a soupe": "càs",
    "cuilleres a soupe": "càs",
    "cuilleres a soupes": "càs",
    "c a soupe": "càs",
    "cac": "càc",
    "cuillere a cafe": "càc",
    "cuilleres a cafe": "càc",
    "c a cafe": "càc",
    # pinches, slices
    "pincee": "pincée",
    "pincees": "pincée",
    "tranche": "tranche",
    "tranches": "tranche",
}

_LIGATURES = str.maketrans({"œ": "oe", "Œ": "OE", "æ": "ae", "Æ": "AE", "’": "'"})
_LEADING_PARTITIVE = re.compile(r"^(de|du|des|d')\s+")
_LEADING_ARTICLE = re.compile(r"^(la|le|les|un|une)\s+")
_EMBEDDED_PARTITIVE = re.compile(r"\s+(de|du|des|d')\s+")


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", str(text or "").translate(_LIGATURES))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def clean_spaces(text: str) -> str:
    return " ".join(str(text or "").split())


def unit_lookup_key(token: str) -> str:
    return clean_spaces(strip_diacritics(str(token or "").lower())).replace("(", "").replace(")", "").replace(".", "")


def is_known_unit(token: str) -> bool:
    return unit_lookup_key(token) in UNIT_ALIASES


def normalize_unit(token: str) -> str:
    """Canonical short unit ('grammes' -> 'g', 'c. à soupe' -> 'càs'); unknown units come back cleaned."""
    cleaned = unit_lookup_key(token)
    if not cleaned:
        return ""
    return UNIT_ALIASES.get(cleaned, cleaned)


def singularize_fr(word: str) -> str:
    if len(word) <= 3:
        return word
    if word.endswith("oeufs"):
        return word[:-1]
    if word.endswith("s") and not word.endswith("us") and not word.endswith("is"):
        return word[:-1]
    if word.endswith("x") and not word.endswith("eaux"):
        return word[:-1]
    return word


def normalize_label_key(label: str) -> str:
    """Grouping key for an ingredient label.

    Lowercases, strips accents, drops one leading partitive and one leading
    article, removes embedded partitives ('pot de creme' -> 'pot creme') and
    singularizes each word with a small French heuristic.
    """
    s = strip_diacritics(clean_spaces(str(label or "").lower()))
    s = _LEADING_PARTITIVE.sub("", s)
    s = _LEADING_ARTICLE.sub("", s)
    s = clean_spaces(_EMBEDDED_PARTITIVE.sub(" ", s))
    if not s:
        return ""
    return clean_spaces(" ".join(singularize_fr(part) for part in s.split(" ")))
