"""Parsed filter schema (Pydantic models).

This schema is the contract between the natural-language extractor and the record-fetch
collaborator. `ParsedFilter.to_fetch_args()` renders the argument object the collaborator expects.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

DEFAULT_LIMIT = 25
ALL_LIMIT = 100
MAX_LIMIT = 100


class SortDirection(StrEnum):
    """Requested ordering by absolute amount."""

    none = "none"
    desc = "desc"
    asc = "asc"


_SORT_FETCH_VALUES: dict[SortDirection, str] = {
    SortDirection.desc: "magnitude_desc",
    SortDirection.asc: "magnitude_asc",
}


class DateRange(BaseModel):
    """An inclusive calendar-day range."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def validate_range(self) -> DateRange:
        """Validate that the inclusive range is well-formed (`start <= end`)."""

        if self.start > self.end:
            raise ValueError("start must be <= end")
        return self


class AmountRange(BaseModel):
    """Bounds on the absolute value of a record amount (either side may be open)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    min: float | None = None
    max: float | None = None

    def as_pair(self) -> list[float | None]:
        return [self.min, self.max]


class ParsedFilter(BaseModel):
    """Structured filter/sort specification extracted from a free-text query.

    Extra keys are allowed so that a caller's pre-existing argument object survives a merge
    (e.g. `orderBy`, `accountIds`).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    merchant_term: str | None = Field(
        default=None,
        validation_alias=AliasChoices("merchant_term", "merchantTerm", "search"),
    )
    date_range: DateRange | None = Field(
        default=None,
        validation_alias=AliasChoices("date_range", "dateRange"),
    )
    amount_range: AmountRange | None = Field(
        default=None,
        validation_alias=AliasChoices("amount_range", "amountRange", "absAmountRange"),
    )
    sort_direction: SortDirection = Field(
        default=SortDirection.none,
        validation_alias=AliasChoices("sort_direction", "sortDirection"),
    )

    @model_validator(mode="before")
    @classmethod
    def fold_fetch_args(cls, data: Any) -> Any:
        """Accept the collaborator's flat argument shape as input.

        `startDate`/`endDate` fold into `date_range`, an `[min, max]` pair folds into
        `amount_range`, and the `sort` hint maps back to a `SortDirection`.
        """

        if not isinstance(data, Mapping):
            return data

        values = dict(data)
        start = values.get("startDate")
        end = values.get("endDate")
        if start is not None and end is not None and "date_range" not in values:
            values["date_range"] = {"start": start, "end": end}
            del values["startDate"], values["endDate"]

        for key in ("absAmountRange", "amountRange", "amount_range"):
            pair = values.get(key)
            if isinstance(pair, (list, tuple)) and len(pair) == 2:
                values[key] = {"min": pair[0], "max": pair[1]}

        sort = values.pop("sort", None)
        if sort is not None and "sort_direction" not in values and "sortDirection" not in values:
            for direction, fetch_value in _SORT_FETCH_VALUES.items():
                if sort in (fetch_value, direction.value):
                    values["sort_direction"] = direction
        return values

    @property
    def has_sort(self) -> bool:
        return self.sort_direction != SortDirection.none

    def to_fetch_args(self) -> dict[str, Any]:
        """Render the collaborator argument object (absent fields are omitted)."""

        args: dict[str, Any] = dict(self.model_extra or {})
        args["limit"] = self.limit
        if self.merchant_term:
            args["search"] = self.merchant_term
        if self.date_range is not None:
            args["startDate"] = self.date_range.start.isoformat()
            args["endDate"] = self.date_range.end.isoformat()
        if self.amount_range is not None:
            args["absAmountRange"] = self.amount_range.as_pair()
        if self.has_sort:
            args["sort"] = _SORT_FETCH_VALUES[self.sort_direction]
        return args


def filter_from_obj(obj: Any) -> ParsedFilter:
    """Validate and parse a ParsedFilter from a decoded argument object."""

    if isinstance(obj, ParsedFilter):
        return obj.model_copy(deep=True)
    return ParsedFilter.model_validate(obj)
