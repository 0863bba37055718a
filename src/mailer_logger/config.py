"""Configuration management for the mailer logger."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mailer_logger.levels import parse_level


class Settings(BaseSettings):
    """Plugin settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MAILER_LOGGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Plugin Configuration
    prefix: str = Field(default="[MAILER] ", description="Prefix for every logged line")
    levels: dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Per-event level overrides, e.g. {\"command_sent\": \"info\"}",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or console)")

    @field_validator("levels")
    @classmethod
    def validate_levels(cls, value: dict[str, Optional[str]]) -> dict[str, Optional[str]]:
        """Reject level names that do not resolve to a known severity."""
        for level in value.values():
            parse_level(level)
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
