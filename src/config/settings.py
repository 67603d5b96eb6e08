"""Environment configuration and validation.

This module defines strongly-typed settings for the tool layer, loaded from environment variables
(optionally via a local `.env` file). The query extractor and the formatter never read them;
settings only decide which verbosity a tool call falls back to and how large a response may grow.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.formatting.verbosity import DEFAULT_MAX_RESPONSE_SIZE, is_known_verbosity

AUTO_VERBOSITY = "auto"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    default_verbosity: str = Field(default="summary", alias="DEFAULT_VERBOSITY")
    max_response_size: int = Field(default=DEFAULT_MAX_RESPONSE_SIZE, alias="MAX_RESPONSE_SIZE", gt=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("default_verbosity")
    @classmethod
    def validate_default_verbosity(cls, value: str) -> str:
        """Accept a verbosity name, an alias (brief/summary/detailed) or `auto`."""

        key = value.strip().lower()
        if key != AUTO_VERBOSITY and not is_known_verbosity(key):
            raise ValueError("DEFAULT_VERBOSITY must be brief, summary, detailed or auto")
        return key


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
