"""
Application settings with Pydantic v2 validation.

Each section reads its own environment prefix (STORAGE_, FORECAST_, ...);
top-level values also come from a .env file. Cross-field rules are checked
at load time so a bad deployment fails on startup rather than mid-sweep.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """SQLite database location and connection pool."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stockroom.db"

    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0)  # ms
    acquire_timeout: float = Field(default=10.0, gt=0)  # seconds

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:5173"]


class SchedulerSettings(BaseSettings):
    """Intervals of the alert and forecast sweeps."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    enabled: bool = True
    alert_interval_seconds: float = Field(default=300.0, gt=0)
    forecast_interval_seconds: float = Field(default=86400.0, gt=0)
    run_on_start: bool = False


class ForecastSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FORECAST_")

    history_window: int = Field(default=30, ge=1)
    min_history: int = Field(default=7, ge=2)
    horizon_days: int = Field(default=7, ge=1, le=365)
    sweep_concurrency: int = Field(default=4, ge=1)

    @model_validator(mode="after")
    def history_fits_window(self) -> "ForecastSettings":
        if self.min_history > self.history_window:
            raise ValueError(
                f"min_history ({self.min_history}) exceeds "
                f"history_window ({self.history_window})"
            )
        return self


class AlertSettings(BaseSettings):
    """Forecast deviation thresholds, as fractions of the forecast."""

    model_config = SettingsConfigDict(env_prefix="ALERT_")

    deviation_threshold: float = Field(default=0.30, gt=0)
    high_deviation_threshold: float = Field(default=0.50, gt=0)
    deviation_window_days: int = Field(default=3, ge=1)

    @model_validator(mode="after")
    def high_above_base(self) -> "AlertSettings":
        if self.high_deviation_threshold < self.deviation_threshold:
            raise ValueError("high_deviation_threshold must not be below deviation_threshold")
        return self


class Settings(BaseSettings):
    """Root settings object; sections are nested models."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stockroom Inventory"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)
    alerts: AlertSettings = Field(default_factory=AlertSettings)

    @model_validator(mode="after")
    def create_data_dir(self) -> "Settings":
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)
        return self


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
