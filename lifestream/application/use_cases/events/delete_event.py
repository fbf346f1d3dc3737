"""Use case for deleting calendar events."""

from __future__ import annotations

from typing import Callable

from lifestream.infrastructure.repositories import EventNotFoundError, EventRepository


def delete_event(
    repository: EventRepository,
    event_id: str,
    *,
    on_change: Callable[[], None] | None = None,
) -> None:
    """Delete the specified event.

    Notifications that still reference it are kept; their link simply no
    longer resolves.
    """

    if not repository.delete(event_id):
        raise EventNotFoundError(event_id)
    if on_change is not None:
        on_change()
