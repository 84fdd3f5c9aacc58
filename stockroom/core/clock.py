"""
The service clock.

Stored timestamps are naive UTC, so "today" for forecast targets and the
deviation window is the UTC calendar day as well.
"""

from datetime import date, datetime


def utcnow() -> datetime:
    return datetime.utcnow()


def utc_today() -> date:
    return utcnow().date()
