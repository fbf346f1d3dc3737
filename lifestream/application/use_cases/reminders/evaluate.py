"""Decide which events are due for a reminder at a given instant."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from lifestream.domain.entities import CalendarEvent
from lifestream.utils import parse_instant, to_app_timezone

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = timedelta(seconds=5)


@dataclass
class ReminderEvaluation:
    """Result of one evaluation pass.

    ``events`` holds every input event in order, with ``notified`` updated
    where needed. ``due`` holds the events whose reminder fires now and
    ``rearmed`` the ones whose flag was cleared.
    """

    events: list[CalendarEvent] = field(default_factory=list)
    due: list[CalendarEvent] = field(default_factory=list)
    rearmed: list[CalendarEvent] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.due or self.rearmed)


def reminder_window(
    start: datetime, reminder_minutes: int, tolerance: timedelta
) -> tuple[datetime, datetime]:
    """Return ``(fire_at, window_end)`` for an event starting at ``start``.

    The window is ``[start - lead, start)`` but never shorter than
    ``tolerance``, so a zero lead fires during the first tick after start.
    """

    fire_at = start - timedelta(minutes=max(reminder_minutes, 0))
    return fire_at, max(start, fire_at + tolerance)


def evaluate_reminders(
    events: Iterable[CalendarEvent],
    *,
    now: datetime,
    tolerance: timedelta = DEFAULT_TOLERANCE,
) -> ReminderEvaluation:
    """Evaluate ``events`` at ``now`` without touching any store."""

    current = to_app_timezone(now)

    evaluation = ReminderEvaluation()
    for event in events:
        if not event.reminder_enabled:
            evaluation.events.append(event)
            continue

        start = parse_instant(event.start)
        if not event.title or start is None:
            logger.warning(
                "Skipping reminder check for malformed event %s (start=%r)",
                event.id,
                event.start,
            )
            evaluation.events.append(event)
            continue

        fire_at, window_end = reminder_window(start, event.reminder_minutes, tolerance)
        if fire_at <= current < window_end:
            if event.notified:
                evaluation.events.append(event)
                continue
            fired = replace(event, notified=True)
            evaluation.events.append(fired)
            evaluation.due.append(fired)
        elif event.notified:
            # Past the window the occurrence is over; before it the flag is stale.
            rearmed = replace(event, notified=False)
            evaluation.events.append(rearmed)
            evaluation.rearmed.append(rearmed)
        else:
            evaluation.events.append(event)
    return evaluation


__all__ = ["DEFAULT_TOLERANCE", "ReminderEvaluation", "evaluate_reminders", "reminder_window"]
