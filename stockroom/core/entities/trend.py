"""Social media trend entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SocialPlatform(str, Enum):
    TWITTER = "TWITTER"
    INSTAGRAM = "INSTAGRAM"
    TIKTOK = "TIKTOK"
    FACEBOOK = "FACEBOOK"
    YOUTUBE = "YOUTUBE"


class TrendAction(str, Enum):
    """What a rising trend suggests doing with matching products."""

    INCREASE_STOCK = "INCREASE_STOCK"
    MONITOR = "MONITOR"


class TrendData(BaseModel):
    """
    A topic observed on a social platform.

    change is the percentage change in mentions over the platform's
    reporting period; keywords are matched against product names.
    """

    id: int | None = None
    name: str
    platform: SocialPlatform
    mentions: int = Field(default=0, ge=0)
    change: float = 0.0
    sentiment: str | None = None
    keywords: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
