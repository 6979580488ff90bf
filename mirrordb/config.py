"""
Mirror configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Mirror settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MIRRORDB_",
        extra="ignore",
    )

    # MongoDB
    mongo_uri: str = Field(default="mongodb://localhost:27017")

    # Sync
    sync_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Upper bound for the initial load; None waits forever",
    )
    schema_version: int = Field(default=1, ge=1)

    # Logging
    log_level: str = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
