"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Optional

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".stockledger"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Stock Ledger"
    app_version: str = "0.1.0"

    # Data directory (SQLite database lives here unless database_url is set)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None
    sqlite_busy_timeout_seconds: float = Field(default=5.0, gt=0)

    log_level: str = "INFO"
    timezone: str = "UTC"

    # Stock adjustment
    adjust_max_attempts: int = Field(default=3, ge=1)
    adjust_backoff_ms: int = Field(default=100, ge=0)
    operation_timeout_seconds: float = Field(default=10.0, gt=0)

    # Read-side aggregates
    aggregate_cache_ttl_seconds: int = Field(default=30, ge=0)
    low_stock_threshold: Decimal = Field(default=Decimal("10"), ge=0)
    top_sellers_limit: int = Field(default=10, ge=1)

    # Category given to products created implicitly by a purchase
    default_purchase_category: str = "Purchase"

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @property
    def adjust_backoff_seconds(self) -> float:
        """Base delay between stock adjustment attempts."""
        return self.adjust_backoff_ms / 1000

    def get_data_dir(self) -> Path:
        """Directory holding the SQLite file, created on first use."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Explicit database_url, else a SQLite file under the data directory."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "stockledger.db"
        return f"sqlite:///{db_path}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
