"""In-memory event store persisted as a single blob."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from lifestream.domain.entities import (
    CalendarEvent,
    coerce_event_type,
    coerce_priority,
)
from lifestream.domain.entities.reminder_settings import DEFAULT_REMINDER_MINUTES
from lifestream.infrastructure.storage import EVENTS_KEY, BlobStore

logger = logging.getLogger(__name__)


class EventNotFoundError(LookupError):
    """Raised when an operation targets an unknown event id."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event with id {event_id} not found")
        self.event_id = event_id


class EventRepository:
    """Provide CRUD operations for :class:`CalendarEvent` objects.

    Events live in memory for the whole session; every mutation writes the
    full collection back to the blob store.
    """

    def __init__(
        self,
        store: BlobStore,
        *,
        default_reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
    ) -> None:
        self._store = store
        self._default_reminder_minutes = default_reminder_minutes
        self._events: dict[str, CalendarEvent] = {}

    def load(self, *, default_reminder_minutes: int | None = None) -> Sequence[CalendarEvent]:
        if default_reminder_minutes is not None:
            self._default_reminder_minutes = default_reminder_minutes
        raw_events = self._store.load(EVENTS_KEY, [])
        if not isinstance(raw_events, list):
            logger.warning("Stored events are not a list; starting empty")
            raw_events = []

        events: dict[str, CalendarEvent] = {}
        for raw in raw_events:
            event = self._to_entity(raw, self._default_reminder_minutes)
            if event is None:
                logger.warning("Skipping unreadable stored event: %r", raw)
                continue
            events[event.id] = event
        self._events = events
        return self.list()

    def list(self) -> Sequence[CalendarEvent]:
        return list(self._events.values())

    def get(self, event_id: str) -> CalendarEvent | None:
        return self._events.get(event_id)

    def add(self, event: CalendarEvent) -> CalendarEvent:
        return self.add_many([event])[0]

    def add_many(self, events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
        added: list[CalendarEvent] = []
        for event in events:
            if event.id in self._events:
                raise ValueError(f"Event with id {event.id} already exists")
            self._events[event.id] = event
            added.append(event)
        if added:
            self.save()
        return added

    def update(self, event: CalendarEvent) -> CalendarEvent:
        if event.id not in self._events:
            raise EventNotFoundError(event.id)
        self._events[event.id] = event
        self.save()
        return event

    def replace_all(self, events: Iterable[CalendarEvent]) -> None:
        """Swap in updated copies of known events, keeping their order."""

        changed = False
        for event in events:
            current = self._events.get(event.id)
            if current is None or current == event:
                continue
            self._events[event.id] = event
            changed = True
        if changed:
            self.save()

    def delete(self, event_id: str) -> bool:
        if self._events.pop(event_id, None) is None:
            return False
        self.save()
        return True

    def save(self) -> bool:
        return self._store.save(
            EVENTS_KEY, [self._to_record(event) for event in self._events.values()]
        )

    @staticmethod
    def _to_record(event: CalendarEvent) -> dict[str, Any]:
        return {
            "id": event.id,
            "title": event.title,
            "description": event.description,
            "start": event.start,
            "end": event.end,
            "type": event.type.value,
            "priority": event.priority.value,
            "isCompleted": event.is_completed,
            "reminderEnabled": event.reminder_enabled,
            "reminderMinutes": event.reminder_minutes,
            "notified": event.notified,
        }

    @staticmethod
    def _to_entity(raw: Any, default_reminder_minutes: int) -> CalendarEvent | None:
        if not isinstance(raw, Mapping):
            return None
        event_id = raw.get("id")
        if not isinstance(event_id, str) or not event_id:
            return None

        # Older records may miss the reminder fields entirely.
        reminder_minutes = raw.get("reminderMinutes")
        if isinstance(reminder_minutes, bool) or not isinstance(reminder_minutes, int):
            reminder_minutes = default_reminder_minutes
        reminder_minutes = max(reminder_minutes, 0)
        reminder_enabled = raw.get("reminderEnabled")
        if not isinstance(reminder_enabled, bool):
            reminder_enabled = True

        start = raw.get("start")
        end = raw.get("end")
        return CalendarEvent(
            id=event_id,
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            start=start if isinstance(start, str) else "",
            end=end if isinstance(end, str) else "",
            type=coerce_event_type(raw.get("type")),
            priority=coerce_priority(raw.get("priority")),
            is_completed=bool(raw.get("isCompleted", False)),
            reminder_enabled=reminder_enabled,
            reminder_minutes=reminder_minutes,
            notified=bool(raw.get("notified", False)),
        )


__all__ = ["EventNotFoundError", "EventRepository"]
