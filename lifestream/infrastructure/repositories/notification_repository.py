"""Bounded, newest-first notification history."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from lifestream.domain.entities import Notification, NotificationType
from lifestream.infrastructure.storage import NOTIFICATIONS_KEY, BlobStore
from lifestream.utils import parse_instant

logger = logging.getLogger(__name__)


def trim_to_capacity(
    notifications: Sequence[Notification], max_items: int
) -> list[Notification]:
    """Return the ``max_items`` most recent notifications, newest first.

    Recency is judged by ``timestamp`` rather than list position, so entries
    built with out-of-order timestamps are still trimmed correctly. A cap of
    ``0`` (or less) disables trimming.
    """

    ordered = sorted(notifications, key=lambda item: item.timestamp, reverse=True)
    if max_items <= 0 or len(ordered) <= max_items:
        return ordered
    return ordered[:max_items]


class NotificationRepository:
    """Provide history operations for :class:`Notification` objects.

    ``max_items`` is read on every append so retention follows the current
    reminder settings.
    """

    def __init__(self, store: BlobStore, *, max_items: Callable[[], int]) -> None:
        self._store = store
        self._max_items = max_items
        self._notifications: list[Notification] = []

    def load(self) -> Sequence[Notification]:
        raw_notifications = self._store.load(NOTIFICATIONS_KEY, [])
        if not isinstance(raw_notifications, list):
            logger.warning("Stored notifications are not a list; starting empty")
            raw_notifications = []

        loaded = []
        for raw in raw_notifications:
            notification = self._to_entity(raw)
            if notification is None:
                logger.warning("Skipping unreadable stored notification: %r", raw)
                continue
            loaded.append(notification)
        self._notifications = trim_to_capacity(loaded, self._max_items())
        return self.list()

    def list(
        self, *, limit: int | None = None, unread_only: bool = False
    ) -> Sequence[Notification]:
        items = [n for n in self._notifications if not (unread_only and n.is_read)]
        if limit is not None:
            items = items[:limit]
        return items

    def get(self, notification_id: str) -> Notification | None:
        for notification in self._notifications:
            if notification.id == notification_id:
                return notification
        return None

    def unread_count(self) -> int:
        return sum(1 for notification in self._notifications if not notification.is_read)

    def add(self, notification: Notification) -> Notification:
        self._notifications.insert(0, notification)
        self._trim()
        self.save()
        return notification

    def trim(self) -> int:
        """Apply the current cap; return the number of dropped entries."""

        removed = self._trim()
        if removed:
            self.save()
        return removed

    def mark_as_read(self, notification_id: str) -> bool:
        notification = self.get(notification_id)
        if notification is None or notification.is_read:
            return False
        notification.is_read = True
        self.save()
        return True

    def mark_all_as_read(self) -> int:
        changed = 0
        for notification in self._notifications:
            if not notification.is_read:
                notification.is_read = True
                changed += 1
        if changed:
            self.save()
        return changed

    def delete(self, notification_id: str) -> bool:
        remaining = [n for n in self._notifications if n.id != notification_id]
        if len(remaining) == len(self._notifications):
            return False
        self._notifications = remaining
        self.save()
        return True

    def delete_all(self) -> int:
        removed = len(self._notifications)
        if removed:
            self._notifications = []
            self.save()
        return removed

    def save(self) -> bool:
        return self._store.save(
            NOTIFICATIONS_KEY, [self._to_record(n) for n in self._notifications]
        )

    def _trim(self) -> int:
        before = len(self._notifications)
        self._notifications = trim_to_capacity(self._notifications, self._max_items())
        removed = before - len(self._notifications)
        if removed:
            logger.debug("Trimmed %s notifications from the history", removed)
        return removed

    @staticmethod
    def _to_record(notification: Notification) -> dict[str, Any]:
        return {
            "id": notification.id,
            "title": notification.title,
            "message": notification.message,
            "type": notification.type.value,
            "relatedEventId": notification.related_event_id,
            "isRead": notification.is_read,
            "timestamp": notification.timestamp.isoformat(),
        }

    @staticmethod
    def _to_entity(raw: Any) -> Notification | None:
        if not isinstance(raw, Mapping):
            return None
        notification_id = raw.get("id")
        timestamp = parse_instant(raw.get("timestamp"))
        if not isinstance(notification_id, str) or timestamp is None:
            return None
        try:
            notification_type = NotificationType(raw.get("type"))
        except ValueError:
            notification_type = NotificationType.INFO
        related_event_id = raw.get("relatedEventId")
        return Notification(
            id=notification_id,
            title=str(raw.get("title") or ""),
            message=str(raw.get("message") or ""),
            type=notification_type,
            timestamp=timestamp,
            related_event_id=related_event_id if isinstance(related_event_id, str) else None,
            is_read=bool(raw.get("isRead", False)),
        )


__all__ = ["NotificationRepository", "trim_to_capacity"]
