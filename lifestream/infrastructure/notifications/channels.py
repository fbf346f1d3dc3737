"""Reminder delivery channels.

Every channel exposes ``async deliver(message, options) -> ChannelResult``.
Returning a result means the attempt is over (delivered or skipped); raising
means the attempt failed and may be retried by the dispatcher.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Mapping, Protocol

from anyio import to_thread

from lifestream.domain.entities import (
    CHANNEL_DESKTOP,
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_SOUND,
    DesktopPermission,
    Notification,
    NotificationType,
    new_notification_id,
)
from lifestream.infrastructure.repositories import NotificationRepository
from lifestream.utils import now_in_app_timezone

from .manager import NotificationConnectionManager
from .permissions import DesktopPermissionTracker
from .publisher import NotificationPublisher

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ChannelResult:
    channel: str
    status: DeliveryStatus
    detail: str | None = None
    attempts: int = 1


@dataclass
class ReminderMessage:
    """What a channel needs to present one reminder."""

    event_id: str
    event_title: str
    title: str
    body: str
    start: str


class ChannelDeliveryError(RuntimeError):
    """Raised by a channel when an attempt did not go through."""


class DeliveryChannel(Protocol):
    name: str

    async def deliver(
        self, message: ReminderMessage, options: Mapping[str, Any]
    ) -> ChannelResult:
        ...


class DesktopChannel:
    """Ask connected clients to raise a desktop alert.

    The alert is gated by the platform permission the client reported: never
    granted means skip, denied means skip and tell the user once.
    """

    name = CHANNEL_DESKTOP

    def __init__(
        self,
        manager: NotificationConnectionManager,
        permission: DesktopPermissionTracker,
    ) -> None:
        self._manager = manager
        self._permission = permission

    async def deliver(
        self, message: ReminderMessage, options: Mapping[str, Any]
    ) -> ChannelResult:
        state = self._permission.state
        if state is DesktopPermission.DENIED:
            self._permission.report_denial_once()
            return ChannelResult(self.name, DeliveryStatus.SKIPPED, "permission denied")
        if state is not DesktopPermission.GRANTED:
            return ChannelResult(self.name, DeliveryStatus.SKIPPED, "permission not granted")

        payload = {
            "type": "reminder.desktop",
            "data": {
                "title": message.title,
                "body": message.body,
                "tag": message.event_id,
                "event_id": message.event_id,
                "require_interaction": True,
            },
        }
        if await self._manager.broadcast(payload) == 0:
            return ChannelResult(self.name, DeliveryStatus.SKIPPED, "no connected client")
        return ChannelResult(self.name, DeliveryStatus.DELIVERED)


class InAppChannel:
    """Record the reminder in the notification history."""

    name = CHANNEL_IN_APP

    def __init__(
        self,
        repository: NotificationRepository,
        publisher: NotificationPublisher,
    ) -> None:
        self._repository = repository
        self._publisher = publisher

    async def deliver(
        self, message: ReminderMessage, options: Mapping[str, Any]
    ) -> ChannelResult:
        notification = Notification(
            id=new_notification_id(),
            title=message.event_title,
            message=message.body,
            type=NotificationType.REMINDER,
            timestamp=now_in_app_timezone(),
            related_event_id=message.event_id,
        )
        self._repository.add(notification)
        self._publisher.dispatch(notification)
        return ChannelResult(self.name, DeliveryStatus.DELIVERED)


SoundPlayer = Callable[[str, ReminderMessage], Awaitable[bool]]


class CommandSoundPlayer:
    """Play sounds through a local command that receives the sound name."""

    def __init__(self, command: str, *, timeout: float = 30.0) -> None:
        self._command = shlex.split(command)
        self._timeout = timeout

    async def __call__(self, sound: str, message: ReminderMessage) -> bool:
        await to_thread.run_sync(
            partial(
                subprocess.run,
                [*self._command, sound],
                timeout=self._timeout,
                capture_output=True,
                check=True,
            )
        )
        return True


class BroadcastSoundPlayer:
    """Ask connected clients to play the sound."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    async def __call__(self, sound: str, message: ReminderMessage) -> bool:
        payload = {
            "type": "reminder.sound",
            "data": {"sound": sound, "event_id": message.event_id},
        }
        return await self._manager.broadcast(payload) > 0


class SoundChannel:
    """Best-effort audio cue; a missing output device is not an error."""

    name = CHANNEL_SOUND

    def __init__(self, player: SoundPlayer, *, default_sound: str = "chime") -> None:
        self._player = player
        self._default_sound = default_sound

    async def deliver(
        self, message: ReminderMessage, options: Mapping[str, Any]
    ) -> ChannelResult:
        sound = str(options.get("sound") or self._default_sound)
        if not await self._player(sound, message):
            return ChannelResult(self.name, DeliveryStatus.SKIPPED, "no audio output available")
        return ChannelResult(self.name, DeliveryStatus.DELIVERED)


EmailSender = Callable[[str, str, str], bool]


class EmailChannel:
    """Send the reminder by email through an injected ``send`` function.

    ``send(recipient, subject, body)`` is blocking and runs in a worker
    thread. Without a sender or a recipient the channel reports ``skipped``
    with the reason instead of pretending to succeed.
    """

    name = CHANNEL_EMAIL

    def __init__(self, send: EmailSender | None) -> None:
        self._send = send

    async def deliver(
        self, message: ReminderMessage, options: Mapping[str, Any]
    ) -> ChannelResult:
        if self._send is None:
            return ChannelResult(self.name, DeliveryStatus.SKIPPED, "email delivery not configured")
        recipient = options.get("recipient")
        if not isinstance(recipient, str) or "@" not in recipient:
            return ChannelResult(self.name, DeliveryStatus.SKIPPED, "no email recipient configured")

        sent = await to_thread.run_sync(self._send, recipient, message.title, message.body)
        if not sent:
            raise ChannelDeliveryError(f"Email to {recipient} was not accepted")
        return ChannelResult(self.name, DeliveryStatus.DELIVERED)


__all__ = [
    "BroadcastSoundPlayer",
    "ChannelDeliveryError",
    "ChannelResult",
    "CommandSoundPlayer",
    "DeliveryChannel",
    "DeliveryStatus",
    "DesktopChannel",
    "EmailChannel",
    "EmailSender",
    "InAppChannel",
    "ReminderMessage",
    "SoundChannel",
    "SoundPlayer",
]
