"""Wiring of the stores, delivery channels and reminder scheduler."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from lifestream.config import Settings, get_settings
from lifestream.domain.entities import (
    CHANNEL_DESKTOP,
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_SOUND,
    CalendarEvent,
)
from lifestream.infrastructure.email import is_email_configured, send_reminder_email
from lifestream.infrastructure.notifications import (
    BroadcastSoundPlayer,
    ChannelResult,
    CommandSoundPlayer,
    DeliveryChannel,
    DesktopChannel,
    DesktopPermissionTracker,
    EmailChannel,
    InAppChannel,
    NotificationConnectionManager,
    NotificationPublisher,
    ReminderDispatcher,
    SoundChannel,
)
from lifestream.infrastructure.notifications.channels import EmailSender, SoundPlayer
from lifestream.infrastructure.repositories import (
    EventRepository,
    NotificationRepository,
    ReminderSettingsRepository,
)
from lifestream.infrastructure.storage import BlobStore

from .use_cases.notifications import (
    notify_delivery_failed,
    notify_desktop_permission_denied,
)
from .use_cases.reminders import ReminderScheduler

logger = logging.getLogger(__name__)


@dataclass
class ApplicationServices:
    """Objects shared by every request for the lifetime of the process."""

    settings: ReminderSettingsRepository
    events: EventRepository
    notifications: NotificationRepository
    manager: NotificationConnectionManager
    publisher: NotificationPublisher
    permission: DesktopPermissionTracker
    dispatcher: ReminderDispatcher
    scheduler: ReminderScheduler

    def load(self) -> None:
        """Read every store; settings first since the others depend on them."""

        current = self.settings.load()
        events = self.events.load(default_reminder_minutes=current.default_reminder_minutes)
        notifications = self.notifications.load()
        logger.info(
            "Loaded %s events and %s notifications (history cap %s)",
            len(events),
            len(notifications),
            current.max_history_items,
        )


def _default_email_sender() -> EmailSender | None:
    if not is_email_configured():
        return None
    return send_reminder_email


def build_services(
    store: BlobStore,
    *,
    config: Settings | None = None,
    manager: NotificationConnectionManager | None = None,
    email_sender: EmailSender | None = None,
    sound_player: SoundPlayer | None = None,
    sleep: Callable[[float], Awaitable[Any]] | None = None,
) -> ApplicationServices:
    """Build the object graph used by the API and the reminder loop.

    Without an explicit ``email_sender`` reminders are emailed through
    SendGrid when it is configured.
    """

    config = config or get_settings()
    manager = manager or NotificationConnectionManager()
    publisher = NotificationPublisher(manager)

    settings_repository = ReminderSettingsRepository(store)
    events = EventRepository(
        store, default_reminder_minutes=settings_repository.get().default_reminder_minutes
    )
    notifications = NotificationRepository(
        store, max_items=lambda: settings_repository.max_history_items
    )

    permission = DesktopPermissionTracker(
        on_denied=lambda: notify_desktop_permission_denied(notifications, publisher=publisher)
    )

    if email_sender is None:
        email_sender = _default_email_sender()
    if sound_player is None:
        if config.reminder_sound_command:
            sound_player = CommandSoundPlayer(config.reminder_sound_command)
        else:
            sound_player = BroadcastSoundPlayer(manager)

    channels: dict[str, DeliveryChannel] = {
        CHANNEL_DESKTOP: DesktopChannel(manager, permission),
        CHANNEL_IN_APP: InAppChannel(notifications, publisher),
        CHANNEL_SOUND: SoundChannel(sound_player),
        CHANNEL_EMAIL: EmailChannel(email_sender),
    }

    def report_failure(event: CalendarEvent, failures: list[ChannelResult]) -> None:
        notify_delivery_failed(notifications, event=event, failures=failures, publisher=publisher)

    dispatcher_kwargs: dict[str, Any] = {}
    if sleep is not None:
        dispatcher_kwargs["sleep"] = sleep
    dispatcher = ReminderDispatcher(
        channels,
        settings_repository.get,
        retry_attempts=config.reminder_retry_attempts,
        retry_delay_seconds=config.reminder_retry_delay_seconds,
        on_failure=report_failure,
        **dispatcher_kwargs,
    )
    scheduler = ReminderScheduler(
        events, dispatcher, tick_seconds=config.reminder_tick_seconds,
        shutdown_timeout=config.reminder_shutdown_timeout_seconds,
    )

    return ApplicationServices(
        settings=settings_repository,
        events=events,
        notifications=notifications,
        manager=manager,
        publisher=publisher,
        permission=permission,
        dispatcher=dispatcher,
        scheduler=scheduler,
    )


__all__ = ["ApplicationServices", "build_services"]
