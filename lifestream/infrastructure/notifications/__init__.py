"""Notification delivery helpers for the infrastructure layer."""

from .channels import (
    BroadcastSoundPlayer,
    ChannelDeliveryError,
    ChannelResult,
    CommandSoundPlayer,
    DeliveryChannel,
    DeliveryStatus,
    DesktopChannel,
    EmailChannel,
    InAppChannel,
    ReminderMessage,
    SoundChannel,
)
from .dispatcher import DispatchReport, ReminderDispatcher, build_reminder_message
from .manager import NotificationConnectionManager, notification_manager
from .permissions import DesktopPermissionTracker
from .publisher import NotificationPublisher, notification_publisher, serialize_notification

__all__ = [
    "BroadcastSoundPlayer",
    "ChannelDeliveryError",
    "ChannelResult",
    "CommandSoundPlayer",
    "DeliveryChannel",
    "DeliveryStatus",
    "DesktopChannel",
    "EmailChannel",
    "InAppChannel",
    "ReminderMessage",
    "SoundChannel",
    "DispatchReport",
    "ReminderDispatcher",
    "build_reminder_message",
    "NotificationConnectionManager",
    "notification_manager",
    "DesktopPermissionTracker",
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
