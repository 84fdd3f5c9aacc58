"""API tests for alert endpoints."""

from unittest.mock import AsyncMock

import pytest

from stockroom.api.dependencies import (
    get_alert_sweep_use_case,
    get_alrt_store,
    get_mark_alert_read_use_case,
    get_resolve_alert_use_case,
)
from stockroom.api.main import app
from stockroom.application.use_cases import (
    MarkAlertReadUseCase,
    ResolveAlertUseCase,
    RunAlertSweepUseCase,
)
from stockroom.core.entities import Alert, AlertPriority, AlertType


def make_alert(**overrides) -> Alert:
    data = {
        "id": 1,
        "alert_type": AlertType.STOCK_OUT,
        "title": "Stock Out Alert",
        "message": "Wireless Mouse is out of stock",
        "action": "Reorder immediately",
        "product_id": 1,
        "priority": AlertPriority.CRITICAL,
    }
    data.update(overrides)
    return Alert(**data)


@pytest.fixture
def mock_alert_store():
    store = AsyncMock()
    app.dependency_overrides[get_alrt_store] = lambda: store
    app.dependency_overrides[get_mark_alert_read_use_case] = lambda: MarkAlertReadUseCase(
        store
    )
    app.dependency_overrides[get_resolve_alert_use_case] = lambda: ResolveAlertUseCase(store)
    return store


class TestAlertsAPI:
    """Tests for /api/alerts."""

    async def test_list(self, async_client, mock_alert_store):
        mock_alert_store.list_alerts.return_value = [
            make_alert(),
            make_alert(id=2, alert_type=AlertType.TREND_SPIKE, priority=AlertPriority.LOW),
        ]
        mock_alert_store.count_alerts.return_value = 2

        response = await async_client.get(
            "/api/alerts", params={"is_resolved": False, "priority": "CRITICAL"}
        )

        assert response.status_code == 200
        data = response.json()
        assert [a["id"] for a in data["alerts"]] == [1, 2]
        assert data["has_more"] is False
        kwargs = mock_alert_store.list_alerts.await_args.kwargs
        assert kwargs["is_resolved"] is False
        assert kwargs["priority"] == AlertPriority.CRITICAL

    async def test_invalid_priority(self, async_client, mock_alert_store):
        response = await async_client.get("/api/alerts", params={"priority": "URGENT"})

        assert response.status_code == 422

    async def test_stats(self, async_client, mock_alert_store):
        mock_alert_store.get_stats.return_value = {
            "total": 3,
            "unread": 2,
            "open": 1,
            "by_priority": {"HIGH": 3},
            "by_type": {"STOCK_LOW": 3},
        }

        response = await async_client.get("/api/alerts/stats")

        assert response.status_code == 200
        assert response.json()["by_priority"] == {"HIGH": 3}

    async def test_sweep(self, async_client):
        monitor = AsyncMock()
        monitor.run_sweep.return_value = [make_alert()]
        app.dependency_overrides[get_alert_sweep_use_case] = lambda: RunAlertSweepUseCase(
            monitor
        )

        response = await async_client.post("/api/alerts/sweep")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["created"][0]["priority"] == "CRITICAL"

    async def test_mark_read(self, async_client, mock_alert_store):
        mock_alert_store.mark_read.return_value = make_alert(is_read=True)

        response = await async_client.put("/api/alerts/1/read")

        assert response.status_code == 200
        assert response.json()["is_read"] is True

    async def test_resolve(self, async_client, mock_alert_store):
        mock_alert_store.resolve.return_value = make_alert(is_resolved=True)

        response = await async_client.put("/api/alerts/1/resolve")

        assert response.status_code == 200
        assert response.json()["is_resolved"] is True

    async def test_unknown_alert(self, async_client, mock_alert_store):
        mock_alert_store.mark_read.return_value = None

        response = await async_client.put("/api/alerts/404/read")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "ALERT_NOT_FOUND"
        assert "GET /api/alerts" in data["hint"]
