"""Tool call handler.

Contract: a registered tool called with valid arguments returns exactly one text payload. Unknown
tools and invalid arguments raise `ToolError` subclasses; collaborator failures (auth, network,
rate limits) propagate unchanged for the dispatch layer to translate.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from time import monotonic
from typing import Any

from pydantic import ValidationError

from src.app import App
from src.tools.registry import ToolError, get_tool

logger = logging.getLogger(__name__)


class ToolArgumentsError(ToolError):
    """Raised when tool arguments fail validation."""


async def call_tool(app: App, name: str, arguments: Mapping[str, Any] | None = None) -> str:
    """Validate arguments, run the named tool and return its formatted text."""

    started = monotonic()
    spec = get_tool(name)

    try:
        args = spec.arguments.model_validate(dict(arguments or {}))
    except ValidationError as exc:
        logger.info("invalid arguments tool=%s errors=%d", name, exc.error_count())
        raise ToolArgumentsError(f"Invalid arguments for {name}: {exc}") from exc

    try:
        result = await spec.run(app, args)
    except Exception:
        latency_ms = int((monotonic() - started) * 1000)
        logger.exception("tool failed tool=%s latency_ms=%d", name, latency_ms)
        raise

    latency_ms = int((monotonic() - started) * 1000)
    logger.info(
        "handled tool=%s records=%d verbosity=%s chars=%d latency_ms=%d",
        name,
        result.record_count,
        result.verbosity,
        len(result.text),
        latency_ms,
    )
    return result.text
