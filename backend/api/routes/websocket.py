"""
ImageWatch WebSocket Routes.

Pushes image swaps to viewers in real time.
Requires Python 3.11+.
"""

import asyncio
import json
import time
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from api.dependencies import get_refresher
from utils.logger import get_logger

router = APIRouter()
logger = get_logger("api.websocket")


class WebSocketManager:
    """
    Manages WebSocket connections for real-time updates.

    Handles connection lifecycle and message broadcasting.
    """

    def __init__(self) -> None:
        """Initialize the WebSocket manager."""
        self._connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self._connections.add(websocket)
        logger.info("websocket_connected", total_connections=len(self._connections))

    async def disconnect(self, websocket: WebSocket) -> None:
        """Unregister a WebSocket connection."""
        async with self._lock:
            self._connections.discard(websocket)
        logger.info("websocket_disconnected", total_connections=len(self._connections))

    async def broadcast(self, message: dict[str, Any]) -> None:
        """
        Broadcast a message to all connected clients.

        Clients that fail to receive are dropped.
        """
        if not self._connections:
            return

        message_json = json.dumps(message)
        disconnected: set[WebSocket] = set()

        async with self._lock:
            for connection in self._connections:
                try:
                    await connection.send_text(message_json)
                except Exception as e:
                    logger.warning("broadcast_failed", error=str(e))
                    disconnected.add(connection)

            self._connections -= disconnected

    async def send_to(self, websocket: WebSocket, message: dict[str, Any]) -> None:
        """Send a message to a specific client."""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.warning("send_failed", error=str(e))

    @property
    def connection_count(self) -> int:
        """Get the number of active connections."""
        return len(self._connections)


# Global WebSocket manager instance
manager = WebSocketManager()


def get_manager() -> WebSocketManager:
    """Get the global WebSocket manager."""
    return manager


class ImageUpdatedEvent(BaseModel):
    """Event sent when the displayed image path changes."""

    type: str = "image_updated"
    path: str


class HeartbeatEvent(BaseModel):
    """Heartbeat event to keep connection alive."""

    type: str = "heartbeat"
    timestamp: float


@router.websocket("/images")
async def image_updates(websocket: WebSocket) -> None:
    """
    Stream image swaps to a viewer.

    The current image path is sent on connect; afterwards clients receive
    image_updated events and a heartbeat every 30s of silence.
    """
    await manager.connect(websocket)

    refresher = get_refresher()
    status = refresher.status() if refresher is not None else {}
    await manager.send_to(websocket, {
        "type": "connected",
        "path": status.get("image_path"),
    })

    try:
        while True:
            try:
                data = await asyncio.wait_for(websocket.receive_text(), timeout=30.0)
            except asyncio.TimeoutError:
                await manager.send_to(websocket, HeartbeatEvent(timestamp=time.time()).model_dump())
                continue

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await manager.send_to(websocket, {"type": "error", "message": "Invalid JSON"})
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await manager.send_to(websocket, {"type": "pong"})
            else:
                await manager.send_to(websocket, {"type": "error", "message": "Unknown message type"})

    except WebSocketDisconnect:
        await manager.disconnect(websocket)
    except Exception as e:
        logger.error("websocket_error", error=str(e))
        await manager.disconnect(websocket)
