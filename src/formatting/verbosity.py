"""Verbosity levels and size-driven level selection."""

from __future__ import annotations

import logging
from enum import StrEnum

logger = logging.getLogger(__name__)


class RecordType(StrEnum):
    """Record domains served by the fetch collaborator."""

    transactions = "transactions"
    accounts = "accounts"
    budgets = "budgets"
    categories = "categories"


class VerbosityLevel(StrEnum):
    """Output density, from one-line totals to full per-record detail."""

    ultra_light = "ultra-light"
    light = "light"
    standard = "standard"


VERBOSITY_ALIASES: dict[str, VerbosityLevel] = {
    "brief": VerbosityLevel.ultra_light,
    "summary": VerbosityLevel.light,
    "detailed": VerbosityLevel.standard,
    "ultra_light": VerbosityLevel.ultra_light,
    "ultralight": VerbosityLevel.ultra_light,
}

# Approximate characters per formatted item.
RESPONSE_SIZE_ESTIMATES: dict[VerbosityLevel, dict[RecordType, int]] = {
    VerbosityLevel.ultra_light: {
        RecordType.accounts: 60,
        RecordType.transactions: 80,
        RecordType.categories: 40,
        RecordType.budgets: 50,
    },
    VerbosityLevel.light: {
        RecordType.accounts: 180,
        RecordType.transactions: 220,
        RecordType.categories: 80,
        RecordType.budgets: 120,
    },
    VerbosityLevel.standard: {
        RecordType.accounts: 800,
        RecordType.transactions: 600,
        RecordType.categories: 200,
        RecordType.budgets: 300,
    },
}

DEFAULT_MAX_RESPONSE_SIZE = 5000


def parse_verbosity(
        value: VerbosityLevel | str | None,
        default: VerbosityLevel = VerbosityLevel.light,
) -> VerbosityLevel:
    """Map a canonical name or alias (brief/summary/detailed) to a level; unknown -> `default`."""

    if isinstance(value, VerbosityLevel):
        return value
    if not isinstance(value, str) or not value.strip():
        return default

    key = value.strip().lower()
    if key in VERBOSITY_ALIASES:
        return VERBOSITY_ALIASES[key]
    try:
        return VerbosityLevel(key)
    except ValueError:
        logger.debug("unknown verbosity=%r default=%s", value, default)
        return default


def is_known_verbosity(value: str) -> bool:
    key = value.strip().lower()
    return key in VERBOSITY_ALIASES or key in {level.value for level in VerbosityLevel}


def calculate_optimal_verbosity(
        record_type: RecordType | str,
        item_count: int,
        max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE,
) -> VerbosityLevel:
    """Select the highest verbosity whose estimated total fits within `max_response_size`.

    standard is tried first, then light; ultra-light is the unconditional fallback.
    """

    kind = RecordType(record_type)
    count = max(item_count, 0)

    for level in (VerbosityLevel.standard, VerbosityLevel.light):
        if RESPONSE_SIZE_ESTIMATES[level][kind] * count <= max_response_size:
            return level
    return VerbosityLevel.ultra_light
