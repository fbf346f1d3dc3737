"""Domain entity representing an entry of the notification history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import uuid4


class NotificationType(str, Enum):
    REMINDER = "reminder"
    SYSTEM = "system"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def new_notification_id() -> str:
    """Generate a fresh opaque notification identifier."""

    return uuid4().hex


@dataclass
class Notification:
    """Information message kept in the notification history.

    ``related_event_id`` is a weak reference: the event may be deleted later and
    lookups then simply find nothing.
    """

    id: str
    title: str
    message: str
    type: NotificationType
    timestamp: datetime
    related_event_id: str | None = None
    is_read: bool = False


__all__ = ["Notification", "NotificationType", "new_notification_id"]
