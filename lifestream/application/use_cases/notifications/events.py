"""Helpers to record and push notifications produced by the application."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from lifestream.domain.entities import (
    CalendarEvent,
    Notification,
    NotificationType,
    new_notification_id,
)
from lifestream.infrastructure.notifications import (
    ChannelResult,
    NotificationPublisher,
    notification_publisher,
)
from lifestream.infrastructure.repositories import NotificationRepository
from lifestream.utils import now_in_app_timezone


def record_notification(
    repository: NotificationRepository,
    *,
    title: str,
    message: str,
    type: NotificationType = NotificationType.SYSTEM,
    related_event_id: str | None = None,
    publisher: NotificationPublisher = notification_publisher,
) -> Notification:
    notification = Notification(
        id=new_notification_id(),
        title=title,
        message=message,
        type=type,
        timestamp=now_in_app_timezone(),
        related_event_id=related_event_id,
    )
    saved = repository.add(notification)
    publisher.dispatch(saved)
    return saved


def notify_app_ready(
    repository: NotificationRepository,
    *,
    publisher: NotificationPublisher = notification_publisher,
) -> Notification:
    """Tell the user that the calendar and its reminders are running."""

    return record_notification(
        repository,
        title="Calendar ready",
        message="Reminders are active for upcoming events.",
        publisher=publisher,
    )


def notify_settings_updated(
    repository: NotificationRepository,
    *,
    changed_fields: Iterable[str],
    publisher: NotificationPublisher = notification_publisher,
) -> Notification:
    fields = ", ".join(sorted(changed_fields)) or "none"
    return record_notification(
        repository,
        title="Reminder settings updated",
        message=f"Updated settings: {fields}.",
        publisher=publisher,
    )


def notify_delivery_failed(
    repository: NotificationRepository,
    *,
    event: CalendarEvent,
    failures: Sequence[ChannelResult],
    publisher: NotificationPublisher = notification_publisher,
) -> Notification:
    """Record that some reminder channels could not deliver ``event``."""

    channels = ", ".join(result.channel for result in failures)
    return record_notification(
        repository,
        title="Reminder delivery failed",
        message=f"Could not deliver the reminder for '{event.title}' via {channels}.",
        type=NotificationType.ERROR,
        related_event_id=event.id,
        publisher=publisher,
    )


def notify_desktop_permission_denied(
    repository: NotificationRepository,
    *,
    publisher: NotificationPublisher = notification_publisher,
) -> Notification:
    return record_notification(
        repository,
        title="Desktop notifications blocked",
        message=(
            "Desktop notifications are blocked by the browser. "
            "Allow them in the site settings to receive desktop reminders."
        ),
        type=NotificationType.WARNING,
        publisher=publisher,
    )
