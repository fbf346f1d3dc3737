"""Use case for updating the reminder settings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from lifestream.domain.entities import ReminderSettings
from lifestream.infrastructure.notifications import NotificationPublisher, notification_publisher
from lifestream.infrastructure.repositories import (
    NotificationRepository,
    ReminderSettingsRepository,
)

from ..notifications import notify_settings_updated

logger = logging.getLogger(__name__)


def _changed_fields(before: ReminderSettings, after: ReminderSettings) -> list[str]:
    changed = [
        f"channels.{name}"
        for name in sorted(set(before.channels) | set(after.channels))
        if before.channels.get(name) != after.channels.get(name)
    ]
    if before.default_reminder_minutes != after.default_reminder_minutes:
        changed.append("default_reminder_minutes")
    if before.max_history_items != after.max_history_items:
        changed.append("max_history_items")
    return changed


def update_reminder_settings(
    settings_repository: ReminderSettingsRepository,
    notifications: NotificationRepository,
    *,
    patch: Mapping[str, Any],
    publisher: NotificationPublisher = notification_publisher,
) -> ReminderSettings:
    """Apply ``patch`` to the reminder settings and report what changed.

    Invalid patches raise ``ValueError`` and leave the settings untouched.
    A lowered history cap is enforced on the existing log straight away.
    """

    before = settings_repository.get()
    updated = settings_repository.update(patch)
    changed = _changed_fields(before, updated)
    if not changed:
        return updated

    if "max_history_items" in changed:
        removed = notifications.trim()
        if removed:
            logger.info("Dropped %s notifications after the history cap changed", removed)
    notify_settings_updated(notifications, changed_fields=changed, publisher=publisher)
    return updated
