"""Endpoints and websocket handler for the notification history."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, WebSocket, WebSocketDisconnect, status

from lifestream.application.services import ApplicationServices
from lifestream.domain.entities import Notification
from lifestream.infrastructure.notifications import serialize_notification
from lifestream.interfaces.api.dependencies import get_services
from lifestream.interfaces.api.schemas import (
    NotificationBulkResult,
    NotificationRead,
    UnreadCountResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("/", response_model=list[NotificationRead])
async def list_notifications(
    limit: int | None = Query(default=None, ge=1),
    unread_only: bool = False,
    services: ApplicationServices = Depends(get_services),
) -> list[NotificationRead]:
    """Return the notification history, newest first."""

    notifications = services.notifications.list(limit=limit, unread_only=unread_only)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    services: ApplicationServices = Depends(get_services),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread=services.notifications.unread_count())


@router.post("/read-all", response_model=NotificationBulkResult)
async def mark_all_as_read(
    services: ApplicationServices = Depends(get_services),
) -> NotificationBulkResult:
    return NotificationBulkResult(affected=services.notifications.mark_all_as_read())


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_as_read(
    notification_id: str,
    services: ApplicationServices = Depends(get_services),
) -> NotificationRead:
    """Mark one notification as read; repeating the call changes nothing."""

    services.notifications.mark_as_read(notification_id)
    notification = services.notifications.get(notification_id)
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return _notification_to_schema(notification)


@router.delete("/", response_model=NotificationBulkResult)
async def delete_all_notifications(
    services: ApplicationServices = Depends(get_services),
) -> NotificationBulkResult:
    return NotificationBulkResult(affected=services.notifications.delete_all())


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    services: ApplicationServices = Depends(get_services),
) -> Response:
    """Delete one notification; unknown ids are ignored."""

    services.notifications.delete(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    services: ApplicationServices = Depends(get_services),
) -> None:
    """Websocket endpoint that streams notifications and reminder alerts."""

    manager = services.manager
    await manager.connect(websocket)
    try:
        pending = services.notifications.list(unread_only=True)
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(n) for n in pending]}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                logger.debug("Ignoring malformed websocket message")
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in ids:
                        if isinstance(notification_id, str):
                            services.notifications.mark_as_read(notification_id)
                continue
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception:  # pragma: no cover - defensive path
        manager.disconnect(websocket)
        raise
