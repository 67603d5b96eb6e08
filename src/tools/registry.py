"""Explicit tool registry.

Every tool is declared here by hand: its name, description, argument model (whose JSON schema is
the tool's input schema) and the coroutine that runs it. Nothing is discovered by reflection.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.config.settings import AUTO_VERBOSITY, Settings
from src.formatting.formatter import (
    annotate,
    format_quick_stats,
    format_records,
    format_spending_summary,
    sort_by_magnitude,
)
from src.formatting.verbosity import (
    RecordType,
    VerbosityLevel,
    calculate_optimal_verbosity,
    is_known_verbosity,
    parse_verbosity,
)
from src.intent.dates import month_start
from src.intent.parser import parse
from src.tools.fetcher import unwrap_records

if TYPE_CHECKING:
    from src.app import App

NO_TRANSACTIONS = "💳 No transactions found"
AGGREGATE_FETCH_LIMIT = 500

_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class ToolError(ValueError):
    """Base class for failures the dispatch layer reports back to the caller."""


class UnknownToolError(ToolError):
    """Raised when a tool name is not registered."""


class ToolArguments(BaseModel):
    """Base argument model: camelCase on the wire, unknown keys rejected."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class VerbosityArguments(ToolArguments):
    verbosity: str | None = Field(
        default=None,
        description="Response verbosity: brief, summary, detailed, or auto (size-based)",
    )

    @field_validator("verbosity")
    @classmethod
    def validate_verbosity(cls, value: str | None) -> str | None:
        if value is None:
            return None
        key = value.lower()
        if key != AUTO_VERBOSITY and not is_known_verbosity(key):
            raise ValueError("verbosity must be brief, summary, detailed or auto")
        return key


class GetTransactionsArguments(VerbosityArguments):
    limit: int = Field(default=25, ge=1, le=100, description="Maximum number of results")
    offset: int = Field(default=0, ge=0, description="Pagination offset")
    start_date: str | None = Field(default=None, pattern=_DATE_PATTERN, description="Start date (YYYY-MM-DD)")
    end_date: str | None = Field(default=None, pattern=_DATE_PATTERN, description="End date (YYYY-MM-DD)")
    search: str | None = Field(default=None, description="Merchant or description search term")


class SmartQueryArguments(VerbosityArguments):
    query: str = Field(
        min_length=1,
        description='Natural-language request, e.g. "last 3 Amazon charges over $20 this month"',
    )


class SpendingSummaryArguments(ToolArguments):
    top_n: int = Field(default=5, ge=1, le=20, description="Number of categories to rank")


class NoArguments(ToolArguments):
    pass


@dataclass(frozen=True)
class ToolResult:
    """Formatted tool output plus what the handler logs about it."""

    text: str
    record_count: int
    verbosity: VerbosityLevel | None = None


ToolRunner = Callable[["App", Any], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    arguments: type[ToolArguments]
    run: ToolRunner
    record_type: RecordType | None = None

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.arguments.model_json_schema(by_alias=True)


def resolve_verbosity(
        requested: str | None,
        settings: Settings,
        record_type: RecordType,
        item_count: int,
) -> VerbosityLevel:
    """Pick the level for a tool call: explicit request, else the configured default.

    `auto` sizes the response against `MAX_RESPONSE_SIZE`.
    """

    value = requested or settings.default_verbosity
    if value == AUTO_VERBOSITY:
        return calculate_optimal_verbosity(record_type, item_count, settings.max_response_size)
    return parse_verbosity(value)


async def _fetch(app: App, record_type: RecordType, args: dict[str, Any]) -> list[Any]:
    payload = await app.fetcher.fetch(record_type, args)
    return unwrap_records(payload, record_type)


def _domain_runner(record_type: RecordType) -> ToolRunner:
    async def run(app: App, args: VerbosityArguments) -> ToolResult:
        records = await _fetch(app, record_type, {})
        level = resolve_verbosity(args.verbosity, app.settings, record_type, len(records))
        text = format_records(records, level, record_type=record_type)
        return ToolResult(text=text, record_count=len(records), verbosity=level)

    return run


async def _run_get_transactions(app: App, args: GetTransactionsArguments) -> ToolResult:
    fetch_args = args.model_dump(by_alias=True, exclude_none=True, exclude={"verbosity"})
    records = await _fetch(app, RecordType.transactions, fetch_args)
    level = resolve_verbosity(args.verbosity, app.settings, RecordType.transactions, len(records))
    text = format_records(records, level, record_type=RecordType.transactions)
    return ToolResult(text=text or NO_TRANSACTIONS, record_count=len(records), verbosity=level)


async def _run_smart_query(app: App, args: SmartQueryArguments) -> ToolResult:
    parsed = parse(args.query, today=app.today())
    records = await _fetch(app, RecordType.transactions, parsed.to_fetch_args())

    # Collaborators may ignore the sort/limit hints; apply them here as well.
    records = sort_by_magnitude(records, parsed.sort_direction)[: parsed.limit]

    level = resolve_verbosity(args.verbosity, app.settings, RecordType.transactions, len(records))
    text = format_records(
        records,
        level,
        record_type=RecordType.transactions,
        original_query=args.query,
        sort_direction=parsed.sort_direction,
    )
    return ToolResult(
        text=text or annotate(NO_TRANSACTIONS, args.query),
        record_count=len(records),
        verbosity=level,
    )


def _month_to_date_args(app: App) -> dict[str, Any]:
    today = app.today()
    return {
        "limit": AGGREGATE_FETCH_LIMIT,
        "startDate": month_start(today).isoformat(),
        "endDate": today.isoformat(),
    }


async def _run_quick_stats(app: App, args: NoArguments) -> ToolResult:
    accounts = await _fetch(app, RecordType.accounts, {})
    transactions = await _fetch(app, RecordType.transactions, _month_to_date_args(app))
    text = format_quick_stats(accounts, transactions, today=app.today())
    return ToolResult(text=text, record_count=len(accounts) + len(transactions))


async def _run_spending_summary(app: App, args: SpendingSummaryArguments) -> ToolResult:
    transactions = await _fetch(app, RecordType.transactions, _month_to_date_args(app))
    text = format_spending_summary(transactions, top_n=args.top_n)
    return ToolResult(text=text, record_count=len(transactions))


_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="accounts_getAll",
        description="Get all accounts with balances (brief: one-line total)",
        arguments=VerbosityArguments,
        run=_domain_runner(RecordType.accounts),
        record_type=RecordType.accounts,
    ),
    ToolSpec(
        name="transactions_getTransactions",
        description="Get transactions with date, search and pagination filters",
        arguments=GetTransactionsArguments,
        run=_run_get_transactions,
        record_type=RecordType.transactions,
    ),
    ToolSpec(
        name="transactions_smartQuery",
        description=(
            "Find transactions from a natural-language request "
            '(e.g. "last 5 Amazon charges over $50 this month", "largest purchases last month")'
        ),
        arguments=SmartQueryArguments,
        run=_run_smart_query,
        record_type=RecordType.transactions,
    ),
    ToolSpec(
        name="budgets_getBudgets",
        description="Get budget lines with spent vs. budgeted percentages",
        arguments=VerbosityArguments,
        run=_domain_runner(RecordType.budgets),
        record_type=RecordType.budgets,
    ),
    ToolSpec(
        name="categories_getCategories",
        description="Get transaction categories",
        arguments=VerbosityArguments,
        run=_domain_runner(RecordType.categories),
        record_type=RecordType.categories,
    ),
    ToolSpec(
        name="insights_getQuickStats",
        description="One-line overview: net worth, month-to-date change, account count",
        arguments=NoArguments,
        run=_run_quick_stats,
    ),
    ToolSpec(
        name="spending_getByCategoryMonth",
        description="Top spending categories for the current month",
        arguments=SpendingSummaryArguments,
        run=_run_spending_summary,
    ),
)

TOOLS: dict[str, ToolSpec] = {spec.name: spec for spec in _TOOLS}


def list_tools() -> list[ToolSpec]:
    """Registered tools in registration order."""

    return list(_TOOLS)


def get_tool(name: str) -> ToolSpec:
    try:
        return TOOLS[name]
    except KeyError:
        raise UnknownToolError(f"Unknown tool: {name}") from None
