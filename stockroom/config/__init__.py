"""Configuration module."""

from stockroom.config.logging import configure_logging, get_logger, job_context
from stockroom.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "job_context",
]
