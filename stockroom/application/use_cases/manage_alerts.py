"""Alert use cases: monitor sweep and operator actions."""

from stockroom.application.dto.responses import AlertResponse, AlertSweepResponse
from stockroom.config import get_logger
from stockroom.core.entities.alert import Alert
from stockroom.core.exceptions import AlertNotFoundError
from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.core.services import AlertMonitor

logger = get_logger(__name__)


class RunAlertSweepUseCase:
    """Run every alert check once and report what was opened."""

    def __init__(self, monitor: AlertMonitor | None = None):
        self._monitor = monitor

    async def _get_monitor(self) -> AlertMonitor:
        if self._monitor is None:
            from stockroom.application.services import get_alert_monitor

            self._monitor = await get_alert_monitor()
        return self._monitor

    async def execute(self) -> list[Alert]:
        monitor = await self._get_monitor()
        return await monitor.run_sweep()

    def to_response(self, created: list[Alert]) -> AlertSweepResponse:
        return AlertSweepResponse(
            created=[AlertResponse.from_entity(a) for a in created],
            count=len(created),
        )


class _AlertActionUseCase:
    def __init__(self, alert_store: IAlertStore | None = None):
        self._alert_store = alert_store

    async def _get_alert_store(self) -> IAlertStore:
        if self._alert_store is None:
            from stockroom.infrastructure.storage.sqlite import get_alert_store

            self._alert_store = await get_alert_store()
        return self._alert_store


class MarkAlertReadUseCase(_AlertActionUseCase):
    """Flag an alert as read."""

    async def execute(self, alert_id: int) -> Alert:
        store = await self._get_alert_store()
        alert = await store.mark_read(alert_id)
        if alert is None:
            raise AlertNotFoundError(alert_id)
        return alert


class ResolveAlertUseCase(_AlertActionUseCase):
    """Resolve an alert. Resolving twice keeps the first timestamp."""

    async def execute(self, alert_id: int) -> Alert:
        store = await self._get_alert_store()
        alert = await store.resolve(alert_id)
        if alert is None:
            raise AlertNotFoundError(alert_id)
        logger.info("alert_closed_by_operator", alert_id=alert_id)
        return alert
