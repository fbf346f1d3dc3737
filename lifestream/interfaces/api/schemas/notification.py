"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from lifestream.domain.entities import NotificationType


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    title: str
    message: str
    type: NotificationType
    related_event_id: str | None = None
    is_read: bool
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    unread: int


class NotificationBulkResult(BaseModel):
    affected: int


__all__ = ["NotificationBulkResult", "NotificationRead", "UnreadCountResponse"]
