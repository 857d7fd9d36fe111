"""Configuration and environment settings for the expense tracker."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, overridable with TRACKER_* environment variables."""

    data_dir: Path = Path("data")
    currency_symbol: str = "₹"
    log_level: str = "INFO"
    default_owner: str = "demo"

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
