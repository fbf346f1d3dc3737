"""Validation helpers shared by event use cases."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from lifestream.utils import format_instant, parse_instant

DEFAULT_EVENT_DURATION = timedelta(hours=1)


def normalize_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValueError("Event title must not be empty")
    return title.strip()


def parse_event_time(value: str | datetime, field_name: str) -> datetime:
    parsed = parse_instant(value)
    if parsed is None:
        raise ValueError(f"'{field_name}' must be an ISO-8601 date and time")
    return parsed


def resolve_time_span(
    start: str | datetime, end: str | datetime | None
) -> tuple[str, str]:
    """Return the stored ``(start, end)`` text for an event.

    A missing ``end`` defaults to one hour after ``start``; an ``end`` before
    ``start`` is rejected.
    """

    start_at = parse_event_time(start, "start")
    end_at = start_at + DEFAULT_EVENT_DURATION if end is None else parse_event_time(end, "end")
    if end_at < start_at:
        raise ValueError("Event end must not be before its start")
    return format_instant(start_at), format_instant(end_at)


def validate_reminder_minutes(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("Reminder minutes must be an integer")
    if value < 0:
        raise ValueError("Reminder minutes must be zero or greater")
    return value
