"""Text normalization for deterministic intent parsing."""

from __future__ import annotations

import re

_MULTISPACE_RE = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """Normalize user text for rules-based parsing.

    Normalization is intentionally conservative:
        - Lowercase.
        - Normalize unicode dashes and curly quotes to ASCII.
        - Collapse whitespace.

    Currency symbols, `&`, `@`, commas and dots are kept: amount and merchant patterns rely on
    them.
    """

    value = (text or "").strip().lower()

    value = value.replace("—", "-").replace("–", "-").replace("−", "-")
    value = value.replace("’", "'").replace("“", '"').replace("”", '"')

    value = _MULTISPACE_RE.sub(" ", value).strip()
    return value
