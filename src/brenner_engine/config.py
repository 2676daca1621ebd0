"""
Engine configuration using pydantic-settings.

Loads configuration from environment variables (``BRENNER_`` prefix) and .env files.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BRENNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Lifecycle
    evidence_warning_level: Literal["DEBUG", "INFO", "WARNING"] = Field(
        default="WARNING",
        description="Log level for the advisory emitted when verify/falsify lacks an evidence reference",
    )

    # CLI output
    json_indent: int = Field(
        default=2,
        ge=0,
        description="Indentation for JSON printed by the CLI",
    )

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached engine settings.

    Returns:
        Settings: Engine settings instance.
    """
    return Settings()
