"""Lenient record field access.

Records come straight from the fetch collaborator as loosely shaped mappings (nested
`merchant.name`, flat `merchantName`, missing keys, nulls). Every accessor here returns a usable
value or a placeholder; none of them raise.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import Decimal
from functools import lru_cache
from typing import Any

import dateparser

UNKNOWN = "Unknown"
UNCATEGORIZED = "Uncategorized"

_DATEPARSER_SETTINGS: dict[str, Any] = {
    "TIMEZONE": "UTC",
    "TO_TIMEZONE": "UTC",
    "RETURN_AS_TIMEZONE_AWARE": True,
}
_ISO_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S"]


def as_mapping(record: Any) -> Mapping[str, Any]:
    if isinstance(record, Mapping):
        return record
    return {}


def lookup(record: Any, *paths: str) -> Any:
    """Return the first non-empty value among dotted `paths` (e.g. "merchant.name")."""

    for path in paths:
        node: Any = as_mapping(record)
        for part in path.split("."):
            node = node.get(part) if isinstance(node, Mapping) else None
            if node is None:
                break
        if node is not None and node != "":
            return node
    return None


def text(record: Any, *paths: str, default: str = UNKNOWN) -> str:
    value = lookup(record, *paths)
    if value is None or isinstance(value, (Mapping, list)):
        return default
    value = str(value).strip()
    return value or default


def number(value: Any) -> float:
    """Coerce to a finite float; anything else (None, garbage, NaN, inf) is 0."""

    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.replace(",", "").replace("$", "").strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return result if math.isfinite(result) else 0.0


def number_at(record: Any, *paths: str) -> float:
    return number(lookup(record, *paths))


def format_money(value: float) -> str:
    """`1500` -> "$1,500", `20913.456` -> "$20,913.46"; the sign is rendered by callers."""

    amount = round(abs(value), 2)
    if amount == int(amount):
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def signed_money(value: float) -> str:
    return ("-" if value < 0 else "") + format_money(value)


def percent(spent: float, budgeted: float) -> float:
    if budgeted == 0:
        return 0.0
    return spent / budgeted * 100


@lru_cache(maxsize=1024)
def _parse_date_string(value: str) -> date | None:
    try:
        parsed = dateparser.parse(
            value,
            date_formats=_ISO_FORMATS,
            languages=["en"],
            settings=_DATEPARSER_SETTINGS,
        )
    except (ValueError, OverflowError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.date()


def to_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        return _parse_date_string(value.strip())
    return None


def display_date(value: Any) -> str:
    """Render as M/D/YYYY, or `Unknown` when the value is not a recognizable date."""

    day = to_date(value)
    if day is None:
        return UNKNOWN
    return f"{day.month}/{day.day}/{day.year}"


# Transactions

def transaction_amount(record: Any) -> float:
    return number_at(record, "amount")


def merchant_name(record: Any) -> str:
    return text(record, "merchant.name", "merchantName", "plaidName", "description", default="Unknown merchant")


def category_name(record: Any) -> str:
    return text(record, "category.name", "categoryName", "category", default=UNCATEGORIZED)


def account_name(record: Any) -> str:
    return text(record, "account.displayName", "account.name", "accountName")


def account_mask(record: Any) -> str | None:
    value = lookup(record, "account.mask", "mask")
    return str(value) if value is not None and not isinstance(value, (Mapping, list)) else None


# Accounts

def account_balance(record: Any) -> float:
    return number_at(record, "currentBalance", "displayBalance", "balance")


def account_type(record: Any) -> str:
    return text(record, "type.display", "type.name", "subtype.display", "type")


def institution_name(record: Any) -> str:
    return text(record, "institution.name", "credential.institution.name", default="Manual")


# Budgets / categories

def budget_name(record: Any) -> str:
    return text(record, "category.name", "categoryName", "name", default=UNCATEGORIZED)


def budgeted_amount(record: Any) -> float:
    return number_at(record, "budgeted", "budgetedAmount", "plannedAmount", "plannedCashFlowAmount")


def spent_amount(record: Any) -> float:
    return abs(number_at(record, "spent", "actualAmount", "actualCashFlowAmount", "spentAmount"))


def group_name(record: Any) -> str:
    return text(record, "group.name", "category.group.name", "groupName", default="Ungrouped")
