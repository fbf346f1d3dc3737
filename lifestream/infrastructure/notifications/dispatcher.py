"""Fan-out of one due reminder to every enabled delivery channel."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Mapping

from lifestream.domain.entities import CHANNEL_SOUND, CalendarEvent, ReminderSettings
from lifestream.utils import now_in_app_timezone, parse_instant, retry_async

from .channels import ChannelResult, DeliveryChannel, DeliveryStatus, ReminderMessage

logger = logging.getLogger(__name__)

# Channels whose failures are only logged, never reported to the user.
_SILENT_CHANNELS = frozenset({CHANNEL_SOUND})


@dataclass
class DispatchReport:
    event_id: str
    results: list[ChannelResult] = field(default_factory=list)

    @property
    def delivered(self) -> list[str]:
        return [r.channel for r in self.results if r.status is DeliveryStatus.DELIVERED]

    @property
    def failed(self) -> list[str]:
        return [r.channel for r in self.results if r.status is DeliveryStatus.FAILED]


def minutes_until(start: datetime, now: datetime) -> int:
    """Whole minutes from ``now`` to ``start``, half rounded up, floored at zero."""

    return max(math.floor((start - now).total_seconds() / 60 + 0.5), 0)


def build_reminder_message(event: CalendarEvent, now: datetime) -> ReminderMessage:
    start = parse_instant(event.start)
    if event.description:
        body = event.description
    elif start is not None:
        body = f"Starts in {minutes_until(start, now)} minutes."
    else:
        body = "Starts soon."
    return ReminderMessage(
        event_id=event.id,
        event_title=event.title,
        title=f"Reminder: {event.title}",
        body=body,
        start=event.start,
    )


FailureHandler = Callable[[CalendarEvent, list[ChannelResult]], object]


class ReminderDispatcher:
    """Deliver reminders on every enabled channel independently.

    Channels run concurrently and never short-circuit each other; each one is
    retried a bounded number of times and ends as delivered, skipped or failed.
    """

    def __init__(
        self,
        channels: Mapping[str, DeliveryChannel],
        settings_provider: Callable[[], ReminderSettings],
        *,
        retry_attempts: int = 3,
        retry_delay_seconds: float = 1.0,
        on_failure: FailureHandler | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._channels = dict(channels)
        self._settings_provider = settings_provider
        self._max_attempts = retry_attempts + 1
        self._retry_delay_seconds = retry_delay_seconds
        self._on_failure = on_failure
        self._sleep = sleep

    async def dispatch(
        self, event: CalendarEvent, *, now: datetime | None = None
    ) -> DispatchReport:
        settings = self._settings_provider()
        message = build_reminder_message(event, now or now_in_app_timezone())
        names = settings.enabled_channels()

        results = await asyncio.gather(
            *(self._deliver(name, message, settings.channel_options(name)) for name in names)
        )
        report = DispatchReport(event_id=event.id, results=list(results))
        logger.info(
            "Reminder for event %s dispatched: %s",
            event.id,
            ", ".join(f"{r.channel}={r.status.value}" for r in report.results) or "no channels",
        )

        reported = [
            result
            for result in report.results
            if result.status is DeliveryStatus.FAILED and result.channel not in _SILENT_CHANNELS
        ]
        if reported and self._on_failure is not None:
            try:
                self._on_failure(event, reported)
            except Exception:
                logger.exception("Failed to record delivery failure for event %s", event.id)
        return report

    async def _deliver(
        self, name: str, message: ReminderMessage, options: Mapping[str, Any]
    ) -> ChannelResult:
        channel = self._channels.get(name)
        if channel is None:
            logger.debug("No delivery channel registered for '%s'", name)
            return ChannelResult(name, DeliveryStatus.SKIPPED, "channel not available", attempts=0)

        outcome = await retry_async(
            lambda: channel.deliver(message, options),
            max_attempts=self._max_attempts,
            delay_seconds=self._retry_delay_seconds,
            description=f"{name} reminder for event {message.event_id}",
            sleep=self._sleep,
        )
        if outcome.succeeded and outcome.value is not None:
            outcome.value.attempts = outcome.attempts
            return outcome.value
        return ChannelResult(
            name,
            DeliveryStatus.FAILED,
            str(outcome.error) if outcome.error else None,
            attempts=outcome.attempts,
        )


__all__ = [
    "DispatchReport",
    "ReminderDispatcher",
    "build_reminder_message",
    "minutes_until",
]
