"""Live alert feed over WebSocket."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from stockroom.config import get_logger
from stockroom.infrastructure.notifications import get_websocket_hub

logger = get_logger(__name__)

router = APIRouter(tags=["websocket"])


@router.websocket("/ws/alerts")
async def alerts_feed(websocket: WebSocket) -> None:
    """
    Push every newly opened alert to the client as
    {"event": "new-alert", "data": {...}}.

    Incoming text "ping" is answered with {"event": "pong"}.
    """
    hub = get_websocket_hub()
    await hub.connect(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        await hub.disconnect(websocket)
