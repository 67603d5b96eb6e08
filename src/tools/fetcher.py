"""Record-fetch collaborator contract.

The collaborator (a finance SDK binding) owns authentication, retries and network errors. This
module only describes how it is called and how its payloads are unwrapped into record lists.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from src.formatting.verbosity import RecordType

_WRAPPER_KEYS = ("results", "records", "items")


class RecordFetcher(Protocol):
    """Fetches one domain of records given a collaborator argument object."""

    async def fetch(self, record_type: RecordType, args: Mapping[str, Any]) -> Any:
        """Return a record list or a paginated wrapper around one."""
        ...


def _from_mapping(payload: Mapping[str, Any], record_type: RecordType | None) -> list[Any] | None:
    keys = [*_WRAPPER_KEYS]
    if record_type is not None:
        keys.append(record_type.value)

    for key in keys:
        value = payload.get(key)
        if isinstance(value, list):
            return value

    # One nested wrapper level, e.g. {"allTransactions": {"totalCount": 3, "results": [...]}}.
    for value in payload.values():
        if isinstance(value, Mapping):
            for key in keys:
                inner = value.get(key)
                if isinstance(inner, list):
                    return inner
    return None


def unwrap_records(payload: Any, record_type: RecordType | None = None) -> list[Any]:
    """Extract the record list from a collaborator payload; unknown shapes yield `[]`."""

    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, tuple):
        return list(payload)
    if isinstance(payload, Mapping):
        return _from_mapping(payload, record_type) or []

    for attr in ("records", "results"):
        value = getattr(payload, attr, None)
        if isinstance(value, (list, tuple)):
            return list(value)
    return []
