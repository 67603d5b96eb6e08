"""Rules-based English query extractor.

This extractor is intentionally lenient and deterministic:
    - it only recognizes a limited set of patterns,
    - every stage targets its own field, so stage order does not change the result,
    - unrecognized or malformed input simply leaves a field unset (it never raises).
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date

from src.intent import dates
from src.intent.dictionaries import (
    LEADING_FILLER,
    STOP_WORDS,
    detect_sort_direction,
    find_known_merchant,
    is_stop_word,
)
from src.intent.normalize import normalize_text
from src.intent.schema import ALL_LIMIT, DEFAULT_LIMIT, MAX_LIMIT, AmountRange, DateRange, SortDirection

EXACT_TOLERANCE = 0.01

_QUANTITY_RE = re.compile(
    r"\b(?:last|recent|top|first)\s+(\d+)"
    r"|\b(\d+)\s+(?:last|recent|top|largest|biggest|smallest)\b"
)
# Longer literals are not a deliberate limit (and stay clear of int() digit limits).
_MAX_QUANTITY_DIGITS = 3

_MERCHANT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:\bfrom\s+|\bat\s+|@\s*)([a-z][a-z0-9\s&]+?)(?:\s|$)"),
    re.compile(r"([a-z][a-z0-9\s&]+?)\s+(?:charges?|payments?|transactions?)\b"),
    re.compile(r"\bspent\s+(?:at|on)\s+([a-z][a-z0-9\s&]+)"),
)

_NUMBER = r"\s*\$?\s*(\d+(?:,\d{3})*(?:\.\d+)?)"
_OVER_RE = re.compile(r"\b(?:over|above|more\s+than)" + _NUMBER)
_UNDER_RE = re.compile(r"\b(?:under|below|less\s+than)" + _NUMBER)
_EXACT_RE = re.compile(r"\b(?:exactly|equal\s+to)" + _NUMBER)

_ALL_RE = re.compile(r"\ball\b")
_NUMERIC_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class ExtractedFields:
    """Fields explicitly found in a query; `None` means "not mentioned"."""

    limit: int | None = None
    merchant_term: str | None = None
    date_range: DateRange | None = None
    amount_range: AmountRange | None = None
    sort_direction: SortDirection = SortDirection.none
    wants_all: bool = False

    def default_limit(self) -> int:
        return ALL_LIMIT if self.wants_all else DEFAULT_LIMIT


def extract_limit(text: str) -> int | None:
    """Extract an explicit quantity ("last 5", "3 recent"); values outside 1..100 are ignored."""

    match = _QUANTITY_RE.search(text)
    if not match:
        return None

    raw = match.group(1) or match.group(2)
    if len(raw) > _MAX_QUANTITY_DIGITS:
        return None

    value = int(raw)
    if 1 <= value <= MAX_LIMIT:
        return value
    return None


def _clean_candidate(candidate: str) -> str | None:
    """Strip filler/stop tokens from both ends; reject what remains if it is not a name."""

    tokens = candidate.split()
    dropped = LEADING_FILLER | STOP_WORDS

    while tokens and (tokens[0] in dropped or _NUMERIC_RE.match(tokens[0])):
        tokens.pop(0)
    while tokens and (tokens[-1] in STOP_WORDS or _NUMERIC_RE.match(tokens[-1])):
        tokens.pop()

    value = " ".join(tokens).strip()
    if len(value) <= 1 or is_stop_word(value) or _NUMERIC_RE.match(value):
        return None
    return value


def extract_merchant(text: str) -> str | None:
    """Extract a merchant/subject term.

    Priority: well-known brand names, then "from/at/@ X", then "X charges|payments|transactions",
    then "spent at/on X". Within a pattern, every match is tried left to right.
    """

    known = find_known_merchant(text)
    if known:
        return known

    for pattern in _MERCHANT_PATTERNS:
        for match in pattern.finditer(text):
            cleaned = _clean_candidate(match.group(1))
            if cleaned:
                return cleaned
    return None


def extract_date_range(text: str, today: date) -> DateRange | None:
    resolved = dates.parse_relative_range(text, today)
    if resolved is None:
        return None
    start, end = resolved
    return DateRange(start=start, end=end)


def _amount(match: re.Match[str] | None) -> float | None:
    if not match:
        return None
    value = float(match.group(1).replace(",", ""))
    if not math.isfinite(value):
        return None
    return value


def extract_amount_range(text: str) -> AmountRange | None:
    """Extract an absolute-amount bound.

    over/under/exactly are evaluated in that order and each overwrites the previous result, so
    only one range survives.
    """

    amount_range: AmountRange | None = None

    over = _amount(_OVER_RE.search(text))
    if over is not None:
        amount_range = AmountRange(min=over, max=None)

    under = _amount(_UNDER_RE.search(text))
    if under is not None:
        amount_range = AmountRange(min=None, max=under)

    exact = _amount(_EXACT_RE.search(text))
    if exact is not None:
        low, high = exact * (1 - EXACT_TOLERANCE), exact * (1 + EXACT_TOLERANCE)
        # The upper bound overflows for literals near the float maximum.
        if math.isfinite(high):
            amount_range = AmountRange(min=low, max=high)

    return amount_range


def extract_fields(text: str, *, today: date) -> ExtractedFields:
    """Run every extraction stage over a query.

    The text is normalized here; callers pass the raw query.
    """

    normalized = normalize_text(text)
    if not normalized:
        return ExtractedFields()

    return ExtractedFields(
        limit=extract_limit(normalized),
        merchant_term=extract_merchant(normalized),
        date_range=extract_date_range(normalized, today),
        amount_range=extract_amount_range(normalized),
        sort_direction=detect_sort_direction(normalized),
        wants_all=_ALL_RE.search(normalized) is not None,
    )
