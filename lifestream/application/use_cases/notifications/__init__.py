"""Public helpers for emitting application notifications."""

from .events import (
    notify_app_ready,
    notify_delivery_failed,
    notify_desktop_permission_denied,
    notify_settings_updated,
    record_notification,
)

__all__ = [
    "notify_app_ready",
    "notify_delivery_failed",
    "notify_desktop_permission_denied",
    "notify_settings_updated",
    "record_notification",
]
