"""Query parser entry point (rules extraction merged into an optional base filter)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from pydantic import ValidationError

from src.intent.rules_parser import extract_fields
from src.intent.schema import ParsedFilter, SortDirection, filter_from_obj

logger = logging.getLogger(__name__)


# Keys validated together: a date range folds from both ends.
_KEY_GROUPS: tuple[tuple[str, ...], ...] = (("startDate", "endDate"), ("start_date", "end_date"))


def _valid_base_values(values: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Split a base mapping into the keys that validate on their own and the ones that don't."""

    pending = dict(values)
    chunks: list[dict[str, Any]] = []
    for group in _KEY_GROUPS:
        chunk = {key: pending.pop(key) for key in group if key in pending}
        if chunk:
            chunks.append(chunk)
    chunks.extend({key: value} for key, value in pending.items())

    kept: dict[str, Any] = {}
    dropped: list[str] = []
    for chunk in chunks:
        try:
            ParsedFilter.model_validate(chunk)
        except ValidationError:
            dropped.extend(str(key) for key in chunk)
        else:
            kept.update(chunk)
    return kept, dropped


def _base_filter(base: ParsedFilter | Mapping[str, Any] | None) -> ParsedFilter:
    if base is None:
        return ParsedFilter()
    try:
        return filter_from_obj(base)
    except ValidationError as exc:
        if not isinstance(base, Mapping):
            logger.warning("ignoring invalid base filter errors=%d", exc.error_count())
            return ParsedFilter()

    # Only the offending keys are dropped; everything else the caller passed survives.
    kept, dropped = _valid_base_values(base)
    logger.warning("dropping invalid base filter keys=%s", ",".join(dropped))
    try:
        return filter_from_obj(kept)
    except ValidationError as exc:
        logger.warning("ignoring invalid base filter errors=%d", exc.error_count())
        return ParsedFilter()


def parse(
        query: str | None,
        base_filter: ParsedFilter | Mapping[str, Any] | None = None,
        *,
        today: date | None = None,
) -> ParsedFilter:
    """Parse a free-text query into a ParsedFilter.

    Strategy:
        1) Start from `base_filter` (a ParsedFilter or a collaborator-style argument mapping).
        2) Every field the query explicitly mentions overrides the base value.
        3) If neither the query nor the base carries a limit, apply the default
           (100 when the query says "all", otherwise 25).

    Never raises for any string input; `today` defaults to the current local date.
    """

    base = _base_filter(base_filter)
    fields = extract_fields(query or "", today=today or date.today())

    explicit_base_limit = base_filter is not None and "limit" in base.model_fields_set

    update: dict[str, Any] = {}
    if fields.limit is not None:
        update["limit"] = fields.limit
    elif not explicit_base_limit:
        update["limit"] = fields.default_limit()
    if fields.merchant_term is not None:
        update["merchant_term"] = fields.merchant_term
    if fields.date_range is not None:
        update["date_range"] = fields.date_range
    if fields.amount_range is not None:
        update["amount_range"] = fields.amount_range
    if fields.sort_direction != SortDirection.none:
        update["sort_direction"] = fields.sort_direction

    parsed = base.model_copy(update=update)
    logger.debug("parsed query=%r filter=%s", query, parsed.to_fetch_args())
    return parsed
