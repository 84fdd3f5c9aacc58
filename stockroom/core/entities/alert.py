"""Alert entity raised by the alert monitor."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    """Condition that opened an alert."""

    STOCK_LOW = "STOCK_LOW"
    STOCK_OUT = "STOCK_OUT"
    REORDER_NEEDED = "REORDER_NEEDED"
    FORECAST_DEVIATION = "FORECAST_DEVIATION"
    TREND_SPIKE = "TREND_SPIKE"
    SYSTEM_ERROR = "SYSTEM_ERROR"


class AlertPriority(str, Enum):
    """Urgency of an alert."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return list(AlertPriority).index(self)


class Alert(BaseModel):
    """
    An incident record.

    Alerts are an audit trail: once opened they stay open until an
    operator resolves them, even if the triggering condition clears.
    """

    id: int | None = None
    alert_type: AlertType
    title: str
    message: str
    action: str | None = None
    product_id: int | None = None
    priority: AlertPriority = AlertPriority.MEDIUM
    is_read: bool = False
    is_resolved: bool = False
    resolved_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
