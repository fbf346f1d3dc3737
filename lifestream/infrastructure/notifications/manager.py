"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from typing import Any, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Manage the active websocket connections of the calendar client."""

    def __init__(self) -> None:
        self._connections: Set[WebSocket] = set()

    @property
    def has_connections(self) -> bool:
        return bool(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it."""

        await websocket.accept()
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool."""

        self._connections.discard(websocket)

    async def broadcast(self, message: dict[str, Any]) -> int:
        """Send ``message`` to every active connection; return how many got it."""

        delivered = 0
        for connection in list(self._connections):
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - defensive cleanup
                logger.debug("Dropping unreachable websocket connection")
                self.disconnect(connection)
                continue
            delivered += 1
        return delivered


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
