"""Repository implementations for infrastructure layer."""

from .event_repository import EventNotFoundError, EventRepository
from .notification_repository import NotificationRepository, trim_to_capacity
from .settings_repository import ReminderSettingsRepository, apply_settings_patch

__all__ = [
    "EventNotFoundError",
    "EventRepository",
    "NotificationRepository",
    "trim_to_capacity",
    "ReminderSettingsRepository",
    "apply_settings_patch",
]
