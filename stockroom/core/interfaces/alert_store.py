"""Abstract interface for alert storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockroom.core.entities.alert import Alert, AlertPriority, AlertType


class IAlertStore(ABC):
    """Interface for alert persistence."""

    @abstractmethod
    async def create(self, alert: Alert) -> Alert:
        """Create an alert unconditionally."""
        pass

    @abstractmethod
    async def create_if_absent(
        self,
        alert: Alert,
        dedup_types: list[AlertType],
        since: datetime | None = None,
    ) -> Alert | None:
        """
        Create an alert unless a matching unresolved one already exists.

        A match is an unresolved alert for the same product whose type is
        in `dedup_types` and, when `since` is given, created at or after it.
        The check and insert run in one transaction. Returns None when
        suppressed.
        """
        pass

    @abstractmethod
    async def get(self, alert_id: int) -> Alert | None:
        """Get alert by ID."""
        pass

    @abstractmethod
    async def list_alerts(
        self,
        is_read: bool | None = None,
        is_resolved: bool | None = None,
        priority: AlertPriority | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Alert]:
        """List alerts by priority (highest first), then newest first."""
        pass

    @abstractmethod
    async def count_alerts(
        self,
        is_read: bool | None = None,
        is_resolved: bool | None = None,
        priority: AlertPriority | None = None,
    ) -> int:
        """Count alerts matching the filters."""
        pass

    @abstractmethod
    async def mark_read(self, alert_id: int) -> Alert | None:
        """Flag an alert as read."""
        pass

    @abstractmethod
    async def resolve(self, alert_id: int) -> Alert | None:
        """Resolve an alert and stamp resolved_at."""
        pass

    @abstractmethod
    async def get_stats(self) -> dict:
        """Totals by priority and type plus unread count."""
        pass
