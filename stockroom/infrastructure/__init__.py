"""Infrastructure layer implementations."""

from stockroom.infrastructure import notifications, scheduling, storage

__all__ = ["storage", "notifications", "scheduling"]
