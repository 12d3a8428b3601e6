# cmdstack/config.py
"""Application configuration using pydantic-settings.

Provides a centralized Settings class for all environment variables.
Every variable is prefixed with CMDSTACK_ (e.g. CMDSTACK_DB_PATH).
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cmdstack.core.commands.models import PrintStyle

MIN_DISPLAY_LIMIT = 5
MAX_DISPLAY_LIMIT = 200


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from .env file and environment variables.
    Environment variables take precedence over .env file values.
    """

    # Storage
    db_path: str = "~/.cmdstack/cmdstack.db"

    # Presentation
    print_style: PrintStyle = PrintStyle.ALL
    display_limit: int = 10  # Rows shown before the list is cut

    # Logging
    log_level: str = "WARNING"
    log_json: bool = False  # Emit JSON lines instead of plain text

    model_config = SettingsConfigDict(
        env_prefix="CMDSTACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        case_sensitive=False,
    )

    @field_validator("display_limit")
    @classmethod
    def _check_display_limit(cls, value: int) -> int:
        if not MIN_DISPLAY_LIMIT <= value <= MAX_DISPLAY_LIMIT:
            raise ValueError(
                f"display_limit must be between {MIN_DISPLAY_LIMIT} "
                f"and {MAX_DISPLAY_LIMIT}"
            )
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        # getLevelName maps a known name to its number, anything else to a string
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


# Singleton instance - import this in your code
settings = Settings()
