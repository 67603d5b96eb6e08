"""Relative date-range resolution (calendar days).

All ranges are inclusive `(start, end)` pairs of calendar dates resolved against an injected
"today"; nothing here reads the clock on its own.

Weeks are Sunday-aligned.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, timedelta

RangeResolver = Callable[[date], tuple[date, date]]


def week_start(day: date) -> date:
    """Sunday on or before `day`."""

    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_start(day: date) -> date:
    return day.replace(day=1)


def this_month(today: date) -> tuple[date, date]:
    return month_start(today), today


def last_month(today: date) -> tuple[date, date]:
    end = month_start(today) - timedelta(days=1)
    return month_start(end), end


def this_week(today: date) -> tuple[date, date]:
    return week_start(today), today


def last_week(today: date) -> tuple[date, date]:
    end = week_start(today) - timedelta(days=1)
    return week_start(end), end


def this_year(today: date) -> tuple[date, date]:
    return date(today.year, 1, 1), today


def last_year(today: date) -> tuple[date, date]:
    return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)


def yesterday(today: date) -> tuple[date, date]:
    day = today - timedelta(days=1)
    return day, day


def only_today(today: date) -> tuple[date, date]:
    return today, today


# Priority order: the first phrase found in the text wins.
RELATIVE_PHRASES: tuple[tuple[str, RangeResolver], ...] = (
    ("this month", this_month),
    ("last month", last_month),
    ("this week", this_week),
    ("last week", last_week),
    ("this year", this_year),
    ("last year", last_year),
    ("yesterday", yesterday),
    ("today", only_today),
)

_PHRASE_RES: tuple[tuple[re.Pattern[str], RangeResolver], ...] = tuple(
    (re.compile(rf"\b{re.escape(phrase)}\b"), resolver) for phrase, resolver in RELATIVE_PHRASES
)


def parse_relative_range(text: str, today: date) -> tuple[date, date] | None:
    """Resolve the highest-priority relative-time phrase in (normalized) text.

    Returns:
        `(start_date, end_date)` (inclusive) if a phrase is found; otherwise `None`.
    """

    value = text or ""
    for pattern, resolver in _PHRASE_RES:
        if pattern.search(value):
            return resolver(today)
    return None
