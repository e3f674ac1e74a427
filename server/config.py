"""Configuration management for Tunesmith server.

Loads and validates environment variables using Pydantic settings.
"""

from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TunesmithConfig(BaseSettings):
    """Tunesmith server configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Server settings
    env: Literal["development", "production", "test"] = Field(
        default="development", alias="TUNESMITH_ENV"
    )
    host: str = Field(default="0.0.0.0", alias="TUNESMITH_HOST")
    port: int = Field(default=3000, alias="TUNESMITH_PORT", ge=1024, le=65535)
    cors_origins: List[str] = Field(default=["*"], alias="TUNESMITH_CORS_ORIGINS")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", alias="TUNESMITH_LOG_LEVEL"
    )

    # Generation settings
    generation_delay_sec: float = Field(
        default=0.0, alias="TUNESMITH_GENERATION_DELAY_SEC", ge=0.0, le=10.0
    )
    max_duration_sec: float = Field(
        default=600.0, alias="TUNESMITH_MAX_DURATION_SEC", gt=0.0, le=3600.0
    )

    # MIDI export
    midi_ticks_per_beat: int = Field(
        default=480, alias="TUNESMITH_MIDI_TICKS_PER_BEAT", ge=24, le=960
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


# Cached configuration instance
_config: TunesmithConfig | None = None


def get_config() -> TunesmithConfig:
    """Get the configuration instance.

    Returns:
        TunesmithConfig: Configuration loaded on first use
    """
    global _config
    if _config is None:
        _config = TunesmithConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next call reloads it."""
    global _config
    _config = None
