"""English dictionaries for merchants, stop words and sort intent.

These mappings are used by the rules-based parser and should remain small and deterministic.
"""

from __future__ import annotations

import re

from src.intent.schema import SortDirection

# Checked before any positional pattern, in this order.
KNOWN_MERCHANTS: tuple[str, ...] = (
    "amazon",
    "starbucks",
    "walmart",
    "target",
    "costco",
    "netflix",
    "uber",
    "airbnb",
    "apple",
    "google",
    "microsoft",
    "tesla",
)

STOP_WORDS: frozenset[str] = frozenset(
    {
        "the",
        "and",
        "or",
        "this",
        "that",
        "month",
        "week",
        "year",
        "day",
        "last",
        "recent",
        "charges",
        "transactions",
    }
)

# Stripped from the front of a merchant candidate ("last 5 whole foods" -> "whole foods").
LEADING_FILLER: frozenset[str] = frozenset(
    {
        "show",
        "me",
        "my",
        "the",
        "all",
        "last",
        "recent",
        "top",
        "first",
        "largest",
        "biggest",
        "smallest",
        "highest",
        "lowest",
    }
)

SORT_SYNONYMS: dict[SortDirection, tuple[str, ...]] = {
    SortDirection.desc: ("largest", "biggest", "highest"),
    SortDirection.asc: ("smallest", "lowest"),
}

_KNOWN_MERCHANT_RE = re.compile(r"\b(" + "|".join(KNOWN_MERCHANTS) + r")\b")

_SORT_RES: list[tuple[SortDirection, re.Pattern[str]]] = [
    (direction, re.compile(r"\b(?:" + "|".join(words) + r")\b"))
    for direction, words in SORT_SYNONYMS.items()
]


def find_known_merchant(text: str) -> str | None:
    """Return the first well-known merchant mentioned as a whole word, scanning left to right."""

    match = _KNOWN_MERCHANT_RE.search(text or "")
    if not match:
        return None
    return match.group(1)


def is_stop_word(term: str) -> bool:
    return term in STOP_WORDS


def detect_sort_direction(text: str) -> SortDirection:
    """Detect a magnitude ordering request; descending wins when both are present."""

    for direction, pattern in _SORT_RES:
        if pattern.search(text or ""):
            return direction
    return SortDirection.none
