"""Pydantic schemas exposed by the API layer."""

from .assistant import AssistantMessageRequest, AssistantMessageResponse
from .event import EventCreate, EventRead, EventReminderUpdate, EventUpdate
from .notification import NotificationBulkResult, NotificationRead, UnreadCountResponse
from .reminder import (
    ChannelSettingsPatch,
    ChannelSettingsSchema,
    DesktopPermissionPayload,
    ReminderCheckResponse,
    ReminderSettingsRead,
    ReminderSettingsUpdate,
)

__all__ = [
    "AssistantMessageRequest",
    "AssistantMessageResponse",
    "EventCreate",
    "EventRead",
    "EventReminderUpdate",
    "EventUpdate",
    "NotificationBulkResult",
    "NotificationRead",
    "UnreadCountResponse",
    "ChannelSettingsPatch",
    "ChannelSettingsSchema",
    "DesktopPermissionPayload",
    "ReminderCheckResponse",
    "ReminderSettingsRead",
    "ReminderSettingsUpdate",
]
