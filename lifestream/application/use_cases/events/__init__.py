"""Use cases for managing calendar events."""

from .create_event import EventsFromText, build_event, create_event, create_events_from_text
from .delete_event import delete_event
from .get_event import get_event, list_events
from .update_event import (
    set_event_reminder_minutes,
    toggle_event_completed,
    toggle_event_reminder,
    update_event,
)

__all__ = [
    "EventsFromText",
    "build_event",
    "create_event",
    "create_events_from_text",
    "delete_event",
    "get_event",
    "list_events",
    "set_event_reminder_minutes",
    "toggle_event_completed",
    "toggle_event_reminder",
    "update_event",
]
