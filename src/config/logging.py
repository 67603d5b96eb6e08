"""Logging configuration for the tool layer."""

from __future__ import annotations

import logging
import os
import sys


def configure_logging(level: str | None = None) -> None:
    """Configure Python logging for the process.

    Logs go to stderr: stdout is reserved for the tool-calling transport and must only ever carry
    protocol frames.
    """

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Reduce noisy third-party logs by default.
    logging.getLogger("dateparser").setLevel(logging.WARNING)
