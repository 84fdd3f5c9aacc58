"""Unit tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stockroom.config import get_settings, reset_settings
from stockroom.config.settings import (
    AlertSettings,
    ForecastSettings,
    Settings,
    StorageSettings,
)


class TestSections:
    def test_forecast_defaults(self):
        cfg = ForecastSettings()
        assert (cfg.history_window, cfg.min_history, cfg.horizon_days) == (30, 7, 7)

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("FORECAST_HORIZON_DAYS", "14")
        monkeypatch.setenv("ALERT_DEVIATION_WINDOW_DAYS", "5")

        assert ForecastSettings().horizon_days == 14
        assert AlertSettings().deviation_window_days == 5

    def test_min_history_beyond_window_rejected(self, monkeypatch):
        monkeypatch.setenv("FORECAST_HISTORY_WINDOW", "5")

        with pytest.raises(ValidationError, match="min_history"):
            ForecastSettings()

    def test_high_threshold_below_base_rejected(self):
        with pytest.raises(ValidationError, match="high_deviation_threshold"):
            AlertSettings(deviation_threshold=0.6, high_deviation_threshold=0.5)

    def test_pool_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            StorageSettings(pool_size=0)


class TestSettings:
    def test_data_dir_created(self, tmp_path: Path):
        data_dir = tmp_path / "nested" / "data"

        settings = Settings(storage=StorageSettings(data_dir=data_dir))

        assert data_dir.is_dir()
        assert settings.storage.db_path == data_dir / "stockroom.db"

    def test_cached_until_reset(self):
        first = get_settings()
        assert get_settings() is first

        reset_settings()
        try:
            assert get_settings() is not first
        finally:
            reset_settings()
