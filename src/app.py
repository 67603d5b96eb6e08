"""Application composition root.

This module wires together configuration, the record-fetch collaborator and the clock used to
resolve relative dates.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from src.config.logging import configure_logging
from src.config.settings import Settings, load_settings
from src.tools.fetcher import RecordFetcher


@dataclass(frozen=True)
class App:
    """Shared dependencies for tool handlers."""

    settings: Settings
    fetcher: RecordFetcher
    clock: Callable[[], date] = field(default=date.today)

    def today(self) -> date:
        return self.clock()


def create_app(
        settings: Settings,
        fetcher: RecordFetcher,
        *,
        clock: Callable[[], date] | None = None,
) -> App:
    """Create the application container."""

    return App(settings=settings, fetcher=fetcher, clock=clock or date.today)


def bootstrap(fetcher: RecordFetcher, *, clock: Callable[[], date] | None = None) -> App:
    """Load settings from the environment, configure logging and build the container.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    settings = load_settings()
    configure_logging(settings.log_level)
    return create_app(settings, fetcher, clock=clock)
