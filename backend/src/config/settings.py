"""
Application settings configuration for the Muay Thai events backend.

Centralized settings loaded from environment variables.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment Variables:
        CRON_SECRET: Bearer secret required by the scheduled generation route
            (empty = route refuses every request)
        MUAYTHAI_GENERATION_LOOKAHEAD_DAYS: Days ahead covered by scheduled
            generation when the caller does not specify (default: 30)
        MUAYTHAI_MAX_GENERATION_WINDOW_DAYS: Largest window a manual
            generation request may span (default: 366)
    """

    cron_secret: str = Field(
        default="",
        validation_alias="CRON_SECRET",
        description="Shared secret expected as 'Authorization: Bearer <secret>' on the cron route"
    )

    generation_lookahead_days: int = Field(
        default=30,
        validation_alias="MUAYTHAI_GENERATION_LOOKAHEAD_DAYS",
        ge=1,
        le=366,
    )

    max_generation_window_days: int = Field(
        default=366,
        validation_alias="MUAYTHAI_MAX_GENERATION_WINDOW_DAYS",
        ge=1,
        le=3660,
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("cron_secret")
    @classmethod
    def strip_cron_secret(cls, v: str) -> str:
        """Ignore surrounding whitespace copied in from secret stores."""
        return v.strip()

    @property
    def cron_configured(self) -> bool:
        """Check if the cron secret is configured."""
        return bool(self.cron_secret)


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings instance.

    Returns:
        AppSettings: Configured application settings from environment
    """
    return AppSettings()
