"""Use cases for creating calendar events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Callable, Protocol, Sequence

from anyio import to_thread

from lifestream.domain.entities import (
    CalendarEvent,
    EventType,
    Priority,
    coerce_event_type,
    coerce_priority,
    new_event_id,
)
from lifestream.infrastructure.openai_client import EventExtraction
from lifestream.infrastructure.repositories import EventRepository

from .validators import normalize_title, resolve_time_span, validate_reminder_minutes

logger = logging.getLogger(__name__)


class EventExtractor(Protocol):
    def extract(
        self,
        transcript: str,
        *,
        current_events: Sequence[CalendarEvent] = (),
        view_date: datetime | None = None,
        now: datetime | None = None,
    ) -> EventExtraction:
        ...


@dataclass
class EventsFromText:
    events: list[CalendarEvent] = field(default_factory=list)
    message: str = ""


def build_event(
    *,
    title: str,
    start: str | datetime,
    end: str | datetime | None = None,
    description: str | None = None,
    type: EventType | str | None = None,
    priority: Priority | str | None = None,
    reminder_enabled: bool = True,
    reminder_minutes: int,
) -> CalendarEvent:
    """Validate the input and return a new, not yet stored event."""

    start_text, end_text = resolve_time_span(start, end)
    return CalendarEvent(
        id=new_event_id(),
        title=normalize_title(title),
        start=start_text,
        end=end_text,
        description=(description or "").strip(),
        type=coerce_event_type(type),
        priority=coerce_priority(priority),
        reminder_enabled=reminder_enabled,
        reminder_minutes=validate_reminder_minutes(reminder_minutes),
    )


def create_event(
    repository: EventRepository,
    *,
    title: str,
    start: str | datetime,
    end: str | datetime | None = None,
    description: str | None = None,
    type: EventType | str | None = None,
    priority: Priority | str | None = None,
    reminder_enabled: bool = True,
    reminder_minutes: int | None = None,
    default_reminder_minutes: int,
    on_change: Callable[[], None] | None = None,
) -> CalendarEvent:
    """Create and store a new calendar event.

    ``reminder_minutes`` falls back to the user's default lead time.
    """

    event = build_event(
        title=title,
        start=start,
        end=end,
        description=description,
        type=type,
        priority=priority,
        reminder_enabled=reminder_enabled,
        reminder_minutes=(
            default_reminder_minutes if reminder_minutes is None else reminder_minutes
        ),
    )
    created = repository.add(event)
    if on_change is not None:
        on_change()
    return created


async def create_events_from_text(
    repository: EventRepository,
    extractor: EventExtractor,
    *,
    text: str,
    default_reminder_minutes: int,
    view_date: datetime | None = None,
    now: datetime | None = None,
    on_change: Callable[[], None] | None = None,
) -> EventsFromText:
    """Ask the language model for events described in ``text`` and store them.

    Proposals that cannot be turned into a valid event are skipped.
    """

    if not text or not text.strip():
        raise ValueError("Message must not be empty")

    extraction = await to_thread.run_sync(
        partial(
            extractor.extract,
            text.strip(),
            current_events=list(repository.list()),
            view_date=view_date,
            now=now,
        )
    )

    events: list[CalendarEvent] = []
    for proposal in extraction.events:
        try:
            event = build_event(
                title=proposal.title,
                start=proposal.start,
                end=proposal.end,
                description=proposal.description,
                type=proposal.type,
                priority=proposal.priority,
                reminder_minutes=default_reminder_minutes,
            )
        except ValueError as exc:
            logger.warning("Ignoring proposed event '%s': %s", proposal.title, exc)
            continue
        events.append(event)

    created = repository.add_many(events)
    if created and on_change is not None:
        on_change()
    return EventsFromText(events=created, message=extraction.message)
