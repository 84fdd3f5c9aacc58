"""Tests for the shared UTC clock."""

from datetime import date, datetime
from unittest.mock import AsyncMock

from stockroom.core import clock
from stockroom.core.services import AlertMonitor, ForecastEngine


def test_today_follows_utc_now(monkeypatch):
    monkeypatch.setattr(clock, "utcnow", lambda: datetime(2024, 1, 15, 23, 30))

    assert clock.utc_today() == date(2024, 1, 15)


def test_engine_and_monitor_default_to_the_same_clock():
    engine = ForecastEngine(AsyncMock(), AsyncMock())
    monitor = AlertMonitor(AsyncMock(), AsyncMock(), AsyncMock())

    assert engine._clock is clock.utc_today
    assert monitor._clock is clock.utcnow
