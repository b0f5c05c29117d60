"""Configuration management for nestrule.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded on first use
and is immutable afterwards.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration settings.

    Settings are loaded from environment variables prefixed with
    ``NESTRULE_`` and from an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NESTRULE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    environment: Literal["development", "production", "testing"] = "development"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Evaluation Limits
    max_depth: int = Field(
        default=64,
        ge=1,
        le=256,
        description="Maximum nesting depth of rule expressions and context data",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
