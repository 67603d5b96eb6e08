"""Tests for the parsed filter schema and its collaborator argument shape."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from src.intent.schema import (
    AmountRange,
    DateRange,
    ParsedFilter,
    SortDirection,
    filter_from_obj,
)


def test_date_range_rejects_reversed_bounds() -> None:
    with pytest.raises(ValidationError):
        DateRange(start=date(2025, 11, 2), end=date(2025, 11, 1))


def test_date_range_allows_single_day() -> None:
    day = date(2025, 11, 1)
    assert DateRange(start=day, end=day).start == day


@pytest.mark.parametrize("limit", [0, 101, -1])
def test_limit_bounds(limit: int) -> None:
    with pytest.raises(ValidationError):
        ParsedFilter(limit=limit)


def test_defaults() -> None:
    parsed = ParsedFilter()
    assert parsed.limit == 25
    assert parsed.sort_direction == SortDirection.none
    assert not parsed.has_sort
    assert parsed.to_fetch_args() == {"limit": 25}


def test_to_fetch_args_renders_all_fields() -> None:
    parsed = ParsedFilter(
        limit=5,
        merchant_term="amazon",
        date_range=DateRange(start=date(2025, 11, 1), end=date(2025, 11, 19)),
        amount_range=AmountRange(min=50.0),
        sort_direction=SortDirection.desc,
    )
    assert parsed.to_fetch_args() == {
        "limit": 5,
        "search": "amazon",
        "startDate": "2025-11-01",
        "endDate": "2025-11-19",
        "absAmountRange": [50.0, None],
        "sort": "magnitude_desc",
    }


def test_fetch_args_validate_back_into_filter() -> None:
    args = {
        "limit": 3,
        "search": "costco",
        "startDate": "2025-10-01",
        "endDate": "2025-10-31",
        "absAmountRange": [None, 25.0],
        "sort": "magnitude_asc",
        "orderBy": "date",
    }
    parsed = filter_from_obj(args)
    assert parsed.merchant_term == "costco"
    assert parsed.date_range == DateRange(start=date(2025, 10, 1), end=date(2025, 10, 31))
    assert parsed.amount_range == AmountRange(max=25.0)
    assert parsed.sort_direction == SortDirection.asc
    assert parsed.to_fetch_args() == args


def test_lone_start_date_is_kept_as_extra() -> None:
    parsed = filter_from_obj({"startDate": "2025-10-01"})
    assert parsed.date_range is None
    assert parsed.to_fetch_args()["startDate"] == "2025-10-01"


def test_filter_from_obj_copies_models() -> None:
    original = ParsedFilter(limit=7)
    copy = filter_from_obj(original)
    assert copy == original
    assert copy is not original
