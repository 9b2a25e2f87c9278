"""
Application configuration module using Pydantic Settings.

Centralizes logging and storage settings for the position tracker.
Values load from SELL_THIRDS_* environment variables with fallback to a
.env file.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024


class Settings(BaseSettings):
    """
    Application settings with validation.

    Settings are loaded from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SELL_THIRDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Debug mode flag",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=False,
        description="Render log events as JSON lines instead of console output",
    )

    # Storage
    storage_backend: Literal["memory", "json"] = Field(
        default="json",
        description="Position/trade store implementation",
    )
    storage_dir: Path = Field(
        default=Path(".sell_thirds"),
        description="Directory holding positions.json and trades.json",
    )
    storage_quota_bytes: int = Field(
        default=DEFAULT_STORAGE_QUOTA_BYTES,
        ge=1024,
        description="Maximum combined size of stored collections in bytes",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level name."""
        level = v.upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {', '.join(sorted(valid_levels))}")
        return level


settings = Settings()
