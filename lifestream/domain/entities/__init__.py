"""Domain entities exposed by the application."""

from .event import (
    CalendarEvent,
    EventType,
    Priority,
    ProposedEvent,
    coerce_event_type,
    coerce_priority,
    new_event_id,
)
from .notification import Notification, NotificationType, new_notification_id
from .reminder_settings import (
    CHANNEL_DESKTOP,
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_SOUND,
    ChannelSettings,
    DesktopPermission,
    ReminderSettings,
    default_reminder_settings,
)

__all__ = [
    "CalendarEvent",
    "EventType",
    "Priority",
    "ProposedEvent",
    "coerce_event_type",
    "coerce_priority",
    "new_event_id",
    "Notification",
    "NotificationType",
    "new_notification_id",
    "CHANNEL_DESKTOP",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_SOUND",
    "ChannelSettings",
    "DesktopPermission",
    "ReminderSettings",
    "default_reminder_settings",
]
