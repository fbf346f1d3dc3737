"""Use cases for editing calendar events."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable

from lifestream.domain.entities import (
    CalendarEvent,
    EventType,
    Priority,
    coerce_event_type,
    coerce_priority,
)
from lifestream.infrastructure.repositories import EventRepository
from lifestream.utils import parse_instant

from .get_event import get_event
from .validators import (
    normalize_title,
    parse_event_time,
    resolve_time_span,
    validate_reminder_minutes,
)


def _store(
    repository: EventRepository,
    event: CalendarEvent,
    on_change: Callable[[], None] | None,
) -> CalendarEvent:
    updated = repository.update(event)
    if on_change is not None:
        on_change()
    return updated


def update_event(
    repository: EventRepository,
    *,
    event_id: str,
    title: str | None = None,
    start: str | datetime | None = None,
    end: str | datetime | None = None,
    description: str | None = None,
    type: EventType | str | None = None,
    priority: Priority | str | None = None,
    is_completed: bool | None = None,
    reminder_enabled: bool | None = None,
    reminder_minutes: int | None = None,
    on_change: Callable[[], None] | None = None,
) -> CalendarEvent:
    """Update the given fields of an event.

    Moving the start or touching the reminder re-arms it. Setting
    ``reminder_minutes`` also switches the reminder on.
    """

    current = get_event(repository, event_id)

    new_start, new_end = current.start, current.end
    if start is not None or end is not None:
        span_start = start if start is not None else current.start
        span_end = end
        if span_end is None:
            # Keep the current end while it still follows the new start.
            current_end = parse_instant(current.end)
            if current_end is not None and current_end >= parse_event_time(span_start, "start"):
                span_end = current_end
        new_start, new_end = resolve_time_span(span_start, span_end)

    notified = current.notified
    if parse_instant(new_start) != parse_instant(current.start):
        notified = False

    new_reminder_enabled = current.reminder_enabled
    new_reminder_minutes = current.reminder_minutes
    if reminder_minutes is not None:
        new_reminder_minutes = validate_reminder_minutes(reminder_minutes)
        new_reminder_enabled = True
        notified = False
    if reminder_enabled is not None:
        if reminder_enabled != new_reminder_enabled:
            notified = False
        new_reminder_enabled = reminder_enabled

    updated = replace(
        current,
        title=normalize_title(title) if title is not None else current.title,
        start=new_start,
        end=new_end,
        description=description.strip() if description is not None else current.description,
        type=coerce_event_type(type) if type is not None else current.type,
        priority=coerce_priority(priority) if priority is not None else current.priority,
        is_completed=is_completed if is_completed is not None else current.is_completed,
        reminder_enabled=new_reminder_enabled,
        reminder_minutes=new_reminder_minutes,
        notified=notified,
    )
    return _store(repository, updated, on_change)


def toggle_event_completed(
    repository: EventRepository,
    *,
    event_id: str,
    on_change: Callable[[], None] | None = None,
) -> CalendarEvent:
    current = get_event(repository, event_id)
    return _store(repository, replace(current, is_completed=not current.is_completed), on_change)


def toggle_event_reminder(
    repository: EventRepository,
    *,
    event_id: str,
    on_change: Callable[[], None] | None = None,
) -> CalendarEvent:
    """Flip the reminder switch; either way the event is re-armed."""

    current = get_event(repository, event_id)
    updated = replace(
        current, reminder_enabled=not current.reminder_enabled, notified=False
    )
    return _store(repository, updated, on_change)


def set_event_reminder_minutes(
    repository: EventRepository,
    *,
    event_id: str,
    minutes: int,
    on_change: Callable[[], None] | None = None,
) -> CalendarEvent:
    current = get_event(repository, event_id)
    updated = replace(
        current,
        reminder_minutes=validate_reminder_minutes(minutes),
        reminder_enabled=True,
        notified=False,
    )
    return _store(repository, updated, on_change)
