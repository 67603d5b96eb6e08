"""Verbosity-driven record formatter.

The formatter converts a record set into compact text. Output size grows monotonically with the
verbosity level:
    - ultra-light: one line (type tag, item count, one aggregate),
    - light: header, up to a fixed number of 2-line items, trailing aggregate,
    - standard: header, more items with identifiers/notes/timestamps, trailing aggregate.

Aggregates over transactions always sum absolute amounts (transaction volume).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from src.formatting import fields
from src.formatting.verbosity import RecordType, VerbosityLevel, parse_verbosity
from src.intent.schema import SortDirection

QUERY_ICON = "🧠"

SUMMARY_CAPS: dict[RecordType, int] = {
    RecordType.transactions: 20,
    RecordType.accounts: 20,
    RecordType.budgets: 15,
    RecordType.categories: 15,
}
DETAILED_CAP = 100

CATEGORY_ICONS: dict[str, str] = {
    "dining": "🍽️",
    "restaurants": "🍽️",
    "food": "🍽️",
    "groceries": "🛒",
    "gas": "⛽",
    "fuel": "⛽",
    "transportation": "🚗",
    "shopping": "🛍️",
    "entertainment": "🎬",
    "utilities": "⚡",
    "rent": "🏠",
    "mortgage": "🏠",
    "insurance": "🛡️",
    "healthcare": "🏥",
    "medical": "🏥",
    "travel": "✈️",
    "education": "📚",
    "fitness": "💪",
    "subscriptions": "📱",
    "income": "💰",
    "salary": "💰",
}
DEFAULT_CATEGORY_ICON = "💸"

ItemRenderer = Callable[[Any, str], str]


@dataclass(frozen=True)
class _Layout:
    """How the records of one verbosity level are laid out."""

    header: str
    render: ItemRenderer
    cap: int
    separator: str
    footer: str


def _as_list(records: Iterable[Any] | None) -> list[Any]:
    if records is None or isinstance(records, (str, bytes, Mapping)):
        return []
    return list(records)


def annotate(body: str, original_query: str | None) -> str:
    """Prefix `body` with a one-line annotation quoting the caller's query."""

    if not original_query or not original_query.strip():
        return body
    query = " ".join(original_query.split())
    return f'{QUERY_ICON} **Smart Query**: "{query}"\n\n{body}'


def _marker(index: int, ranked: bool) -> str:
    return f"{index}." if ranked else "•"


def _render(records: Sequence[Any], layout: _Layout, ranked: bool) -> str:
    blocks = [
        layout.render(record, _marker(index, ranked))
        for index, record in enumerate(records[: layout.cap], start=1)
    ]
    remaining = len(records) - layout.cap
    if remaining > 0:
        blocks.append(f"...and {remaining} more")
    return f"{layout.header}\n\n" + layout.separator.join(blocks) + f"\n\n{layout.footer}"


def _cap(record_type: RecordType, verbosity: VerbosityLevel) -> int:
    if verbosity == VerbosityLevel.standard:
        return DETAILED_CAP
    return SUMMARY_CAPS[record_type]


def _identifier(record: Any) -> str:
    return fields.text(record, "id")


def _optional_lines(record: Any, labels: Sequence[tuple[str, str]], as_date: bool = False) -> list[str]:
    lines: list[str] = []
    for label, path in labels:
        value = fields.lookup(record, path)
        if value is None or isinstance(value, (Mapping, list)):
            continue
        rendered = fields.display_date(value) if as_date else str(value).strip()
        if rendered:
            lines.append(f"  {label}: {rendered}")
    return lines


# Transactions

def _transaction_light(record: Any, marker: str) -> str:
    amount = fields.transaction_amount(record)
    return (
        f"{marker} {fields.display_date(fields.lookup(record, 'date'))} - {fields.merchant_name(record)}\n"
        f"  {fields.signed_money(amount)} • {fields.category_name(record)}"
    )


def _transaction_standard(record: Any, marker: str) -> str:
    amount = fields.transaction_amount(record)
    mask = fields.account_mask(record)
    lines = [
        f"{marker} {fields.display_date(fields.lookup(record, 'date'))} - **{fields.merchant_name(record)}**",
        f"  Amount: {fields.signed_money(amount)}",
        f"  Category: {fields.category_name(record)}",
        f"  Account: {fields.account_name(record)}" + (f" (...{mask})" if mask else ""),
        f"  ID: {_identifier(record)}",
    ]
    if fields.lookup(record, "pending") is True:
        lines.append("  Status: pending")
    lines += _optional_lines(record, [("Notes", "notes")])
    lines += _optional_lines(record, [("Created", "createdAt"), ("Updated", "updatedAt")], as_date=True)
    return "\n".join(lines)


def transaction_volume(records: Iterable[Any]) -> float:
    return sum(abs(fields.transaction_amount(record)) for record in records)


def format_transactions(
        records: Iterable[Any] | None,
        verbosity: VerbosityLevel | str | None = VerbosityLevel.light,
        original_query: str | None = None,
        *,
        ranked: bool = False,
) -> str:
    """Format transactions.

    An empty record set formats to the empty string (no message, no query annotation).
    """

    items = _as_list(records)
    if not items:
        return ""

    level = parse_verbosity(verbosity)
    volume = fields.format_money(transaction_volume(items))
    count = len(items)

    if level == VerbosityLevel.ultra_light:
        return annotate(f"💳 {count} transactions, Volume: {volume}", original_query)

    if level == VerbosityLevel.light:
        layout = _Layout(
            header=f"💳 **Transactions** ({count})",
            render=_transaction_light,
            cap=_cap(RecordType.transactions, level),
            separator="\n",
            footer=f"Total volume: {volume}",
        )
    else:
        layout = _Layout(
            header=f"💳 **Transaction Summary** ({count} transactions)",
            render=_transaction_standard,
            cap=_cap(RecordType.transactions, level),
            separator="\n\n",
            footer=f"**Total Transaction Volume: {volume}**",
        )
    return annotate(_render(items, layout, ranked), original_query)


# Accounts

def _account_light(record: Any, marker: str) -> str:
    hidden = " (hidden)" if fields.lookup(record, "isHidden") is True else ""
    return (
        f"{marker} {fields.text(record, 'displayName', 'name')}: "
        f"{fields.signed_money(fields.account_balance(record))}{hidden}\n"
        f"  {fields.account_type(record)} • {fields.institution_name(record)}"
    )


def _account_standard(record: Any, marker: str) -> str:
    mask = fields.account_mask(record)
    lines = [
        f"{marker} **{fields.text(record, 'displayName', 'name')}**",
        f"  Type: {fields.account_type(record)}",
        f"  Balance: {fields.signed_money(fields.account_balance(record))}",
        f"  Institution: {fields.institution_name(record)}",
        f"  Updated: {fields.display_date(fields.lookup(record, 'updatedAt', 'displayLastUpdatedAt'))}",
        f"  ID: {_identifier(record)}" + (f" (...{mask})" if mask else ""),
    ]
    if fields.lookup(record, "isHidden") is True:
        lines.append("  Hidden: yes")
    if fields.lookup(record, "includeInNetWorth") is False:
        lines.append("  Net worth: excluded")
    return "\n".join(lines)


def format_accounts(
        records: Iterable[Any] | None,
        verbosity: VerbosityLevel | str | None = VerbosityLevel.light,
        original_query: str | None = None,
        *,
        ranked: bool = False,
) -> str:
    """Format accounts; the aggregate is the sum of current balances."""

    items = _as_list(records)
    level = parse_verbosity(verbosity)
    total = fields.signed_money(sum(fields.account_balance(record) for record in items))
    count = len(items)

    if level == VerbosityLevel.ultra_light:
        return annotate(f"💰 {count} accounts, Total: {total}", original_query)
    if not items:
        return annotate(f"📊 No accounts found, Total: {total}", original_query)

    if level == VerbosityLevel.light:
        layout = _Layout(
            header=f"📊 **Accounts** ({count})",
            render=_account_light,
            cap=_cap(RecordType.accounts, level),
            separator="\n",
            footer=f"Total: {total}",
        )
    else:
        layout = _Layout(
            header=f"📊 **Account Details** ({count} accounts)",
            render=_account_standard,
            cap=_cap(RecordType.accounts, level),
            separator="\n\n",
            footer=f"**Total Balance: {total}**",
        )
    return annotate(_render(items, layout, ranked), original_query)


# Budgets

def _usage(record: Any) -> tuple[float, float, float]:
    spent = fields.spent_amount(record)
    budgeted = fields.budgeted_amount(record)
    return spent, budgeted, fields.percent(spent, budgeted)


def _budget_light(record: Any, marker: str) -> str:
    spent, budgeted, pct = _usage(record)
    return (
        f"{marker} {fields.budget_name(record)}: "
        f"{fields.format_money(spent)} / {fields.format_money(budgeted)} ({pct:.0f}%)\n"
        f"  Remaining: {fields.signed_money(budgeted - spent)}"
    )


def _budget_standard(record: Any, marker: str) -> str:
    spent, budgeted, pct = _usage(record)
    lines = [
        f"{marker} **{fields.budget_name(record)}**",
        f"  Budgeted: {fields.format_money(budgeted)}",
        f"  Spent: {fields.format_money(spent)}",
        f"  Remaining: {fields.signed_money(budgeted - spent)}",
        f"  Used: {pct:.0f}%",
        f"  Group: {fields.group_name(record)}",
        f"  ID: {fields.text(record, 'id', 'category.id')}",
    ]
    lines += _optional_lines(record, [("Month", "month")], as_date=True)
    return "\n".join(lines)


def _totals(items: Sequence[Any]) -> tuple[float, float, float]:
    spent = sum(fields.spent_amount(record) for record in items)
    budgeted = sum(fields.budgeted_amount(record) for record in items)
    return spent, budgeted, fields.percent(spent, budgeted)


def format_budgets(
        records: Iterable[Any] | None,
        verbosity: VerbosityLevel | str | None = VerbosityLevel.light,
        original_query: str | None = None,
        *,
        ranked: bool = False,
) -> str:
    """Format budget lines with per-item spent/budgeted percentages."""

    items = _as_list(records)
    level = parse_verbosity(verbosity)
    spent, budgeted, pct = _totals(items)
    spent_text, budgeted_text = fields.format_money(spent), fields.format_money(budgeted)

    if level == VerbosityLevel.ultra_light:
        return annotate(
            f"📋 {len(items)} budgets, Spent: {spent_text} of {budgeted_text}", original_query
        )
    if not items:
        return annotate(
            f"📋 No budgets found, Spent: {spent_text} of {budgeted_text}", original_query
        )

    if level == VerbosityLevel.light:
        layout = _Layout(
            header=f"📋 **Budgets** ({len(items)})",
            render=_budget_light,
            cap=_cap(RecordType.budgets, level),
            separator="\n",
            footer=f"Total: {spent_text} spent of {budgeted_text} budgeted ({pct:.0f}%)",
        )
    else:
        layout = _Layout(
            header=f"📋 **Budget Details** ({len(items)} budgets)",
            render=_budget_standard,
            cap=_cap(RecordType.budgets, level),
            separator="\n\n",
            footer=f"**Total Spent: {spent_text} of {budgeted_text} ({pct:.0f}%)**",
        )
    return annotate(_render(items, layout, ranked), original_query)


# Categories

def _category_light(record: Any, marker: str) -> str:
    spent, budgeted, pct = _usage(record)
    return (
        f"{marker} {fields.text(record, 'name', default=fields.UNCATEGORIZED)} ({fields.group_name(record)})\n"
        f"  Spent: {fields.format_money(spent)} of {fields.format_money(budgeted)} ({pct:.0f}%)"
    )


def _category_standard(record: Any, marker: str) -> str:
    spent, budgeted, pct = _usage(record)
    lines = [
        f"{marker} **{fields.text(record, 'name', default=fields.UNCATEGORIZED)}**",
        f"  Group: {fields.group_name(record)}",
        f"  Type: {fields.text(record, 'group.type', 'type')}",
        f"  Spent: {fields.format_money(spent)} of {fields.format_money(budgeted)} ({pct:.0f}%)",
        f"  ID: {_identifier(record)}",
    ]
    if fields.lookup(record, "isSystemCategory") is True:
        lines.append("  System category: yes")
    lines += _optional_lines(record, [("Updated", "updatedAt")], as_date=True)
    return "\n".join(lines)


def format_categories(
        records: Iterable[Any] | None,
        verbosity: VerbosityLevel | str | None = VerbosityLevel.light,
        original_query: str | None = None,
        *,
        ranked: bool = False,
) -> str:
    """Format transaction categories (spent/budgeted columns are optional in the records)."""

    items = _as_list(records)
    level = parse_verbosity(verbosity)
    spent, _budgeted, _pct = _totals(items)
    spent_text = fields.format_money(spent)

    if level == VerbosityLevel.ultra_light:
        return annotate(f"🏷️ {len(items)} categories, Spent: {spent_text}", original_query)
    if not items:
        return annotate(f"🏷️ No categories found, Spent: {spent_text}", original_query)

    if level == VerbosityLevel.light:
        layout = _Layout(
            header=f"🏷️ **Categories** ({len(items)})",
            render=_category_light,
            cap=_cap(RecordType.categories, level),
            separator="\n",
            footer=f"Total spent: {spent_text}",
        )
    else:
        layout = _Layout(
            header=f"🏷️ **Category Details** ({len(items)} categories)",
            render=_category_standard,
            cap=_cap(RecordType.categories, level),
            separator="\n\n",
            footer=f"**Total Spent: {spent_text}**",
        )
    return annotate(_render(items, layout, ranked), original_query)


_FORMATTERS: dict[RecordType, Callable[..., str]] = {
    RecordType.transactions: format_transactions,
    RecordType.accounts: format_accounts,
    RecordType.budgets: format_budgets,
    RecordType.categories: format_categories,
}

_MAGNITUDES: dict[RecordType, Callable[[Any], float]] = {
    RecordType.transactions: lambda record: abs(fields.transaction_amount(record)),
    RecordType.accounts: lambda record: abs(fields.account_balance(record)),
    RecordType.budgets: fields.spent_amount,
    RecordType.categories: fields.spent_amount,
}


def sort_by_magnitude(
        records: Iterable[Any] | None,
        direction: SortDirection,
        record_type: RecordType = RecordType.transactions,
) -> list[Any]:
    """Stable sort by absolute amount (balance / spent for non-transaction records)."""

    items = _as_list(records)
    if direction == SortDirection.none:
        return items
    return sorted(
        items,
        key=_MAGNITUDES[RecordType(record_type)],
        reverse=direction == SortDirection.desc,
    )


def format_records(
        records: Iterable[Any] | None,
        verbosity: VerbosityLevel | str | None = VerbosityLevel.light,
        *,
        record_type: RecordType | str = RecordType.transactions,
        original_query: str | None = None,
        sort_direction: SortDirection = SortDirection.none,
) -> str:
    """Format a record set of the given type.

    `sort_direction` describes an ordering already applied upstream; any value other than
    `none` switches item markers from bullets to ranks.
    """

    formatter = _FORMATTERS[RecordType(record_type)]
    return formatter(
        records,
        verbosity,
        original_query,
        ranked=sort_direction != SortDirection.none,
    )


# Pre-aggregated summaries

def category_icon(category: str) -> str:
    lowered = (category or "").lower()
    for key, icon in CATEGORY_ICONS.items():
        if key in lowered:
            return icon
    return DEFAULT_CATEGORY_ICON


def format_quick_stats(
        accounts: Iterable[Any] | None,
        recent_transactions: Iterable[Any] | None = None,
        *,
        today: date,
) -> str:
    """One-line overview: net worth, month-to-date net change, account count."""

    account_items = _as_list(accounts)
    net_worth = sum(
        fields.account_balance(account)
        for account in account_items
        if fields.lookup(account, "includeInNetWorth") is True
    )

    month_change = 0.0
    for txn in _as_list(recent_transactions):
        day = fields.to_date(fields.lookup(txn, "date"))
        if day is not None and (day.year, day.month) == (today.year, today.month):
            month_change += fields.transaction_amount(txn)

    arrow, sign = ("⬆️", "+") if month_change >= 0 else ("⬇️", "-")
    return (
        f"💰 {fields.signed_money(net_worth)} • {arrow} {sign}{fields.format_money(month_change)}"
        f" • 📊 {len(account_items)} accounts"
    )


def format_spending_summary(transactions: Iterable[Any] | None, top_n: int = 5) -> str:
    """Top expense categories by absolute spend (income rows are ignored)."""

    totals: dict[str, float] = {}
    for txn in _as_list(transactions):
        amount = fields.transaction_amount(txn)
        if amount < 0:
            category = fields.category_name(txn)
            totals[category] = totals.get(category, 0.0) + abs(amount)

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[: max(top_n, 0)]
    if not ranked:
        return f"{DEFAULT_CATEGORY_ICON} No expenses found"

    shown = ranked[:3]
    parts = [f"{category_icon(category)} {fields.format_money(round(amount))}" for category, amount in shown]
    return " • ".join(parts) + f" (top {len(shown)} this month)"
