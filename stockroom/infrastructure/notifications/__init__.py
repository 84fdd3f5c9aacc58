"""Live notification delivery."""

from stockroom.infrastructure.notifications.websocket_hub import (
    WebSocketHub,
    get_websocket_hub,
)

__all__ = ["WebSocketHub", "get_websocket_hub"]
