"""
Configuration management for the report card assistant.

All configuration comes from environment variables or .env file.
Every field has a default, so the engine runs without any configuration.
"""

from datetime import datetime
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from zeugnis.config.constants import (
    DATA_DIR,
    MAX_DOCUMENT_BYTES,
    MAX_EVENTS_PER_COMPETENCY,
    MAX_TIMESTAMP_DATE,
    MIN_TIMESTAMP_DATE,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ZEUGNIS_",
        case_sensitive=False
    )

    # Storage
    data_dir: str = DATA_DIR
    storage_quota_bytes: Optional[int] = None  # Simulated device quota, None = unlimited
    max_document_bytes: int = Field(default=MAX_DOCUMENT_BYTES, gt=0)

    # Plausible date window for rating timestamps
    min_timestamp: datetime = MIN_TIMESTAMP_DATE
    max_timestamp: datetime = MAX_TIMESTAMP_DATE

    # Rating history
    max_events_per_competency: int = Field(default=MAX_EVENTS_PER_COMPETENCY, gt=0)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one loguru knows."""
        valid_levels = ['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator('storage_quota_bytes')
    @classmethod
    def validate_quota(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("storage_quota_bytes must be positive when set")
        return v

    @model_validator(mode='after')
    def validate_timestamp_window(self):
        """Ensure the plausible date window is not empty."""
        if self.min_timestamp >= self.max_timestamp:
            raise ValueError("min_timestamp must be before max_timestamp")
        return self

    @property
    def min_timestamp_ms(self) -> int:
        return int(self.min_timestamp.timestamp() * 1000)

    @property
    def max_timestamp_ms(self) -> int:
        return int(self.max_timestamp.timestamp() * 1000)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from environment."""
    get_settings.cache_clear()
    return get_settings()
