"""Use cases for reading calendar events."""

from __future__ import annotations

from datetime import datetime

from lifestream.domain.entities import CalendarEvent
from lifestream.infrastructure.repositories import EventNotFoundError, EventRepository
from lifestream.utils import parse_instant


def get_event(repository: EventRepository, event_id: str) -> CalendarEvent:
    """Return the event identified by ``event_id`` or raise an error."""

    event = repository.get(event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def list_events(
    repository: EventRepository,
    *,
    range_start: datetime | None = None,
    range_end: datetime | None = None,
) -> list[CalendarEvent]:
    """Return events sorted by start, optionally limited to those overlapping a range.

    Events whose times cannot be parsed are only listed when no range is given.
    """

    if range_start is not None and range_end is not None and range_end < range_start:
        raise ValueError("Range end must not be before range start")

    selected: list[tuple[datetime | None, CalendarEvent]] = []
    for event in repository.list():
        start = parse_instant(event.start)
        end = parse_instant(event.end) or start
        if range_start is not None or range_end is not None:
            if start is None or end is None:
                continue
            if range_end is not None and start >= range_end:
                continue
            if range_start is not None and end < range_start:
                continue
        selected.append((start, event))

    selected.sort(key=lambda item: (item[0] is None, item[0] or datetime.min))
    return [event for _, event in selected]
