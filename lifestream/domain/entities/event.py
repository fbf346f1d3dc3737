"""Domain entities describing calendar events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import uuid4


class EventType(str, Enum):
    """Closed set of event categories."""

    WORK = "WORK"
    PERSONAL = "PERSONAL"
    URGENT = "URGENT"
    OTHER = "OTHER"


class Priority(str, Enum):
    """Closed set of event priorities."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def coerce_event_type(value: Any) -> EventType:
    """Return the matching :class:`EventType` or ``OTHER`` for unknown input."""

    if isinstance(value, EventType):
        return value
    if isinstance(value, str):
        try:
            return EventType(value.strip().upper())
        except ValueError:
            pass
    return EventType.OTHER


def coerce_priority(value: Any) -> Priority:
    """Return the matching :class:`Priority` or ``MEDIUM`` for unknown input."""

    if isinstance(value, Priority):
        return value
    if isinstance(value, str):
        try:
            return Priority(value.strip().upper())
        except ValueError:
            pass
    return Priority.MEDIUM


def new_event_id() -> str:
    """Generate a fresh opaque event identifier."""

    return uuid4().hex


@dataclass
class CalendarEvent:
    """Single-occurrence calendar event with its reminder state.

    ``start`` and ``end`` hold ISO-8601 text; ``notified`` is only ever set by
    the reminder scheduler.
    """

    id: str
    title: str
    start: str
    end: str
    description: str = ""
    type: EventType = EventType.OTHER
    priority: Priority = Priority.MEDIUM
    is_completed: bool = False
    reminder_enabled: bool = True
    reminder_minutes: int = 15
    notified: bool = False


@dataclass
class ProposedEvent:
    """Event suggested by the language model before it enters the store."""

    title: str
    start: str
    end: str | None = None
    description: str = ""
    type: str | None = None
    priority: str | None = None


__all__ = [
    "CalendarEvent",
    "EventType",
    "Priority",
    "ProposedEvent",
    "coerce_event_type",
    "coerce_priority",
    "new_event_id",
]
