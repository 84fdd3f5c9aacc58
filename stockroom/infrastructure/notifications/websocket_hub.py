"""
WebSocket fan-out for live alert delivery.

Implements INotificationSink: every published alert is pushed to all
connected dashboard clients as a JSON event.
"""

import asyncio
from typing import Any

from starlette.websockets import WebSocket

from stockroom.config import get_logger
from stockroom.core.entities.alert import Alert
from stockroom.core.exceptions import NotificationError
from stockroom.core.interfaces.notifier import INotificationSink

logger = get_logger(__name__)

ALERT_EVENT = "new-alert"


class WebSocketHub(INotificationSink):
    """Tracks connected clients and broadcasts events to them."""

    def __init__(self, send_timeout: float = 5.0) -> None:
        self.send_timeout = send_timeout
        self._clients: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept and register a client."""
        await websocket.accept()
        async with self._lock:
            self._clients.add(websocket)
        logger.info("websocket_client_connected", clients=self.client_count)

    async def disconnect(self, websocket: WebSocket) -> None:
        """Forget a client."""
        async with self._lock:
            self._clients.discard(websocket)
        logger.info("websocket_client_disconnected", clients=self.client_count)

    async def publish(self, alert: Alert) -> None:
        """Push an alert to every connected client."""
        await self.broadcast(ALERT_EVENT, alert.model_dump(mode="json"))

    async def broadcast(self, event: str, data: Any) -> int:
        """
        Send one event to all clients and return how many received it.

        Clients that fail are dropped. Raises NotificationError only
        when there were clients and none could be reached.
        """
        async with self._lock:
            clients = list(self._clients)
        if not clients:
            return 0

        message = {"event": event, "data": data}
        results = await asyncio.gather(
            *(self._send(ws, message) for ws in clients),
            return_exceptions=True,
        )

        dead = [ws for ws, res in zip(clients, results) if isinstance(res, BaseException)]
        if dead:
            async with self._lock:
                for ws in dead:
                    self._clients.discard(ws)
            logger.warning("websocket_clients_dropped", event=event, dropped=len(dead))

        delivered = len(clients) - len(dead)
        if delivered == 0:
            raise NotificationError(f"no client accepted '{event}'")
        return delivered

    async def _send(self, websocket: WebSocket, message: dict) -> None:
        await asyncio.wait_for(websocket.send_json(message), timeout=self.send_timeout)


_hub: WebSocketHub | None = None


def get_websocket_hub() -> WebSocketHub:
    """Get the process-wide WebSocket hub."""
    global _hub
    if _hub is None:
        _hub = WebSocketHub()
    return _hub
