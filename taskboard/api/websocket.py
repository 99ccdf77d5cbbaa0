"""WebSocket endpoint: the toast channel for notifications."""

import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from typing import Dict, Set
import json

from ..dependencies.auth import get_current_user_id
from ..models import Notification, NotificationEvent

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """Manages WebSocket connections for toast delivery."""

    def __init__(self):
        # Map of user_id to set of active WebSocket connections
        self.active_connections: Dict[int, Set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: int):
        """Accept a new WebSocket connection."""
        await websocket.accept()
        self.active_connections.setdefault(user_id, set()).add(websocket)

    def disconnect(self, websocket: WebSocket, user_id: int):
        """Remove a WebSocket connection."""
        if user_id in self.active_connections:
            self.active_connections[user_id].discard(websocket)
            if not self.active_connections[user_id]:
                del self.active_connections[user_id]

    async def send_personal_message(self, message: dict, user_id: int):
        """Send a message to all connections of a specific user."""
        disconnected = []
        for connection in list(self.active_connections.get(user_id, ())):
            try:
                await connection.send_json(message)
            except Exception:
                disconnected.append(connection)

        # Clean up disconnected
        for conn in disconnected:
            self.disconnect(conn, user_id)

    def get_connection_count(self) -> int:
        """Get the total number of active connections."""
        return sum(len(conns) for conns in self.active_connections.values())


# Global connection manager instance
manager = ConnectionManager()


async def push_notification(notification: Notification):
    """Toast listener: forward a notification to its recipient's sockets."""
    event = NotificationEvent(
        data=notification.model_dump(mode="json"),
        user_id=notification.user_id,
    )
    await manager.send_personal_message(event.model_dump(mode="json"), notification.user_id)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for notification toasts.

    Events sent:
    - connected: sent once after the handshake
    - notification: a reminder or custom notification was emitted
    - pong: reply to a ping
    """
    user_id = await get_current_user_id()
    await manager.connect(websocket, user_id)

    try:
        await websocket.send_json({
            "type": "connected",
            "message": "Connected to notifications",
            "connections": manager.get_connection_count()
        })

        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
            except json.JSONDecodeError:
                # If not JSON, treat as ping
                if data == "ping":
                    await websocket.send_json({"type": "pong"})

    except WebSocketDisconnect:
        logger.debug("WebSocket closed for user %s", user_id)
    finally:
        manager.disconnect(websocket, user_id)


@router.get("/ws/status")
async def websocket_status():
    """Get WebSocket connection status."""
    return {
        "active_connections": manager.get_connection_count(),
        "status": "healthy"
    }
