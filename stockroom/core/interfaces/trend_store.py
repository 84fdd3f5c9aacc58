"""Abstract interface for social trend storage."""

from abc import ABC, abstractmethod

from stockroom.core.entities.trend import SocialPlatform, TrendData


class ITrendStore(ABC):
    """Interface for social trend persistence."""

    @abstractmethod
    async def create_trend(self, trend: TrendData) -> TrendData:
        """Store a trend and set its id."""
        pass

    @abstractmethod
    async def list_trends(
        self, platform: SocialPlatform | None = None, limit: int = 10
    ) -> list[TrendData]:
        """Trends by mentions, most mentioned first."""
        pass

    @abstractmethod
    async def list_rising(self, min_change: float, min_mentions: int) -> list[TrendData]:
        """Trends above both thresholds, fastest growing first."""
        pass
