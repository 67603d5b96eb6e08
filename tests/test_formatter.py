"""Tests for the verbosity-driven record formatter."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from src.formatting.formatter import (
    CATEGORY_ICONS,
    DEFAULT_CATEGORY_ICON,
    category_icon,
    format_accounts,
    format_budgets,
    format_categories,
    format_quick_stats,
    format_records,
    format_spending_summary,
    format_transactions,
    sort_by_magnitude,
)
from src.formatting.verbosity import RecordType, VerbosityLevel
from src.intent.schema import SortDirection

_LEVELS = (VerbosityLevel.ultra_light, VerbosityLevel.light, VerbosityLevel.standard)


def _transactions(count: int) -> list[dict[str, Any]]:
    return [
        {
            "id": str(index),
            "amount": -(index + 1) * 1.5,
            "date": "2025-11-01",
            "merchant": {"name": f"Merchant {index}"},
            "category": {"name": "Shopping"},
            "account": {"displayName": "Checking", "mask": "0001"},
        }
        for index in range(count)
    ]


def test_transactions_ultra_light(mock_transactions: list[dict[str, Any]]) -> None:
    assert format_transactions(mock_transactions, "brief") == "💳 2 transactions, Volume: $58.01"


def test_transactions_light(mock_transactions: list[dict[str, Any]]) -> None:
    output = format_transactions(mock_transactions, VerbosityLevel.light)
    assert output.startswith("💳 **Transactions** (2)")
    assert "• 1/15/2024 - Amazon\n  -$45.67 • Shopping" in output
    assert "• 1/14/2024 - Starbucks\n  -$12.34 • Dining" in output
    assert output.endswith("Total volume: $58.01")


def test_transactions_standard(mock_transactions: list[dict[str, Any]]) -> None:
    output = format_transactions(mock_transactions, "detailed")
    assert output.startswith("💳 **Transaction Summary** (2 transactions)")
    assert "**Amazon**" in output
    assert "  Amount: -$45.67" in output
    assert "  Account: Chase Checking (...1234)" in output
    assert "  ID: 2" in output
    assert output.endswith("**Total Transaction Volume: $58.01**")


def test_transaction_volume_sums_absolute_amounts() -> None:
    records = [{"amount": 100}, {"amount": -100}]
    assert format_transactions(records, "brief") == "💳 2 transactions, Volume: $200"


def test_empty_transactions_format_to_empty_string() -> None:
    for level in _LEVELS:
        assert format_transactions([], level) == ""
        assert format_transactions([], level, "last 3 Amazon charges") == ""
    assert format_transactions(None) == ""


def test_query_annotation(mock_transactions: list[dict[str, Any]]) -> None:
    output = format_transactions(mock_transactions, "summary", "largest   purchases")
    assert output.startswith('🧠 **Smart Query**: "largest purchases"\n\n💳 **Transactions** (2)')


def test_blank_query_is_not_annotated(mock_transactions: list[dict[str, Any]]) -> None:
    assert format_transactions(mock_transactions, "brief", "  ") == "💳 2 transactions, Volume: $58.01"


def test_scenario_last_3_amazon_charges(mock_transactions: list[dict[str, Any]]) -> None:
    output = format_transactions(mock_transactions[:1], "standard", "last 3 Amazon charges")
    assert "last 3 Amazon charges" in output
    assert "Amazon" in output
    assert output.splitlines()[-1] == "**Total Transaction Volume: $45.67**"


@pytest.mark.parametrize("record_type", list(RecordType))
@pytest.mark.parametrize("level", _LEVELS)
def test_records_with_missing_fields_still_format(record_type: RecordType, level: VerbosityLevel) -> None:
    output = format_records([{}, None, {"amount": None, "date": "not a date"}], level, record_type=record_type)
    assert output
    assert "None" not in output


def test_missing_transaction_fields_use_placeholders() -> None:
    output = format_transactions([{}], "light")
    assert "• Unknown - Unknown merchant\n  $0 • Uncategorized" in output


def test_summary_cap_adds_remainder_line() -> None:
    output = format_transactions(_transactions(25), "summary")
    assert sum(1 for line in output.splitlines() if line.startswith("• ")) == 20
    assert "...and 5 more" in output


def test_ranked_output_uses_numbers(mock_transactions: list[dict[str, Any]]) -> None:
    records = sort_by_magnitude(mock_transactions, SortDirection.asc)
    output = format_records(records, "light", sort_direction=SortDirection.asc)
    assert "1. 1/14/2024 - Starbucks" in output
    assert "2. 1/15/2024 - Amazon" in output
    assert "• 1/" not in output


@pytest.mark.parametrize("count", [0, 2, 1000])
@pytest.mark.parametrize("record_type", list(RecordType))
def test_output_size_grows_with_verbosity(count: int, record_type: RecordType) -> None:
    records = [
        {**record, "displayName": f"Account {index}", "currentBalance": 100 + index, "name": f"Category {index}",
         "budgeted": 200, "spent": index}
        for index, record in enumerate(_transactions(count))
    ]
    sizes = [len(format_records(records, level, record_type=record_type)) for level in _LEVELS]
    assert sizes[0] <= sizes[1] <= sizes[2]


def test_accounts(mock_accounts: list[dict[str, Any]]) -> None:
    assert format_accounts(mock_accounts, "brief") == "💰 2 accounts, Total: $20,913.46"

    light = format_accounts(mock_accounts, "summary")
    assert light.startswith("📊 **Accounts** (2)")
    assert "• Chase Checking: $5,234.56\n  Checking • Chase" in light
    assert light.endswith("Total: $20,913.46")

    standard = format_accounts(mock_accounts, "detailed")
    assert "  Institution: Wells Fargo" in standard
    assert "  Updated: 1/1/2024" in standard
    assert standard.endswith("**Total Balance: $20,913.46**")


def test_empty_accounts() -> None:
    assert format_accounts([], "light") == "📊 No accounts found, Total: $0"
    assert format_accounts([], "standard") == "📊 No accounts found, Total: $0"
    assert format_accounts([], "brief") == "💰 0 accounts, Total: $0"


def test_budgets() -> None:
    records = [
        {"category": {"name": "Groceries"}, "budgeted": 500, "spent": -250},
        {"category": {"name": "Fun"}, "budgeted": 0, "spent": 0},
    ]
    assert format_budgets(records, "brief") == "📋 2 budgets, Spent: $250 of $500"

    light = format_budgets(records, "light")
    assert "• Groceries: $250 / $500 (50%)\n  Remaining: $250" in light
    assert "• Fun: $0 / $0 (0%)" in light
    assert light.endswith("Total: $250 spent of $500 budgeted (50%)")

    standard = format_budgets(records, "standard")
    assert "  Used: 50%" in standard
    assert "  Group: Ungrouped" in standard


def test_empty_budgets_and_categories() -> None:
    assert format_budgets([], "light") == "📋 No budgets found, Spent: $0 of $0"
    assert format_categories([], "light") == "🏷️ No categories found, Spent: $0"


def test_categories() -> None:
    records = [{"id": "c1", "name": "Dining", "group": {"name": "Food", "type": "expense"}}]
    light = format_categories(records, "light")
    assert "• Dining (Food)\n  Spent: $0 of $0 (0%)" in light

    standard = format_categories(records, "standard")
    assert "  Type: expense" in standard
    assert "  ID: c1" in standard


def test_sort_by_magnitude_is_stable() -> None:
    records = [{"id": "a", "amount": -5}, {"id": "b", "amount": 5}, {"id": "c", "amount": -50}]
    assert [r["id"] for r in sort_by_magnitude(records, SortDirection.desc)] == ["c", "a", "b"]
    assert [r["id"] for r in sort_by_magnitude(records, SortDirection.asc)] == ["a", "b", "c"]
    assert sort_by_magnitude(records, SortDirection.none) == records


def test_category_icon() -> None:
    assert category_icon("Restaurants & Bars") == CATEGORY_ICONS["restaurants"]
    assert category_icon("Something else") == DEFAULT_CATEGORY_ICON
    assert category_icon("") == DEFAULT_CATEGORY_ICON


def test_quick_stats() -> None:
    accounts = [
        {"currentBalance": 1000, "includeInNetWorth": True},
        {"currentBalance": -200, "includeInNetWorth": True},
        {"currentBalance": 50, "includeInNetWorth": False},
    ]
    transactions = [
        {"amount": -30, "date": "2025-11-03"},
        {"amount": 100, "date": "2025-11-10"},
        {"amount": -999, "date": "2025-10-31"},
    ]
    today = date(2025, 11, 19)
    assert format_quick_stats(accounts, transactions, today=today) == "💰 $800 • ⬆️ +$70 • 📊 3 accounts"
    assert format_quick_stats(accounts, transactions[:1], today=today) == "💰 $800 • ⬇️ -$30 • 📊 3 accounts"
    assert format_quick_stats([], today=today) == "💰 $0 • ⬆️ +$0 • 📊 0 accounts"


def test_spending_summary() -> None:
    transactions = [
        {"amount": -50, "category": {"name": "Dining"}},
        {"amount": -25, "category": {"name": "Dining"}},
        {"amount": -120, "category": {"name": "Groceries"}},
        {"amount": -10, "category": {"name": "Gas"}},
        {"amount": -5, "category": {"name": "Shopping"}},
        {"amount": 1000, "category": {"name": "Salary"}},
    ]
    expected = (
        f"{CATEGORY_ICONS['groceries']} $120 • {CATEGORY_ICONS['dining']} $75 • "
        f"{CATEGORY_ICONS['gas']} $10 (top 3 this month)"
    )
    assert format_spending_summary(transactions) == expected


def test_spending_summary_without_expenses() -> None:
    assert format_spending_summary([{"amount": 10}]) == "💸 No expenses found"
    assert format_spending_summary(None) == "💸 No expenses found"
