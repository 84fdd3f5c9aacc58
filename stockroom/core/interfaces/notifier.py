"""Abstract interface for live alert delivery."""

from abc import ABC, abstractmethod

from stockroom.core.entities.alert import Alert


class INotificationSink(ABC):
    """Fire-and-forget delivery of alerts to connected viewers."""

    @abstractmethod
    async def publish(self, alert: Alert) -> None:
        """Deliver an alert. May raise NotificationError."""
        pass
