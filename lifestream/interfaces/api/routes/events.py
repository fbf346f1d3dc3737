"""Routes for managing calendar events."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from lifestream.application.services import ApplicationServices
from lifestream.application.use_cases.events import (
    create_event as create_event_uc,
    delete_event as delete_event_uc,
    get_event as get_event_uc,
    list_events as list_events_uc,
    set_event_reminder_minutes as set_event_reminder_minutes_uc,
    toggle_event_completed as toggle_event_completed_uc,
    toggle_event_reminder as toggle_event_reminder_uc,
    update_event as update_event_uc,
)
from lifestream.domain.entities import CalendarEvent
from lifestream.infrastructure.repositories import EventNotFoundError
from lifestream.interfaces.api.dependencies import get_services
from lifestream.interfaces.api.schemas import (
    EventCreate,
    EventRead,
    EventReminderUpdate,
    EventUpdate,
)

router = APIRouter(prefix="/events", tags=["events"])


def _to_read_model(event: CalendarEvent) -> EventRead:
    return EventRead.model_validate(event)


def _not_found(exc: EventNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/", response_model=list[EventRead])
async def list_events(
    start: datetime | None = Query(default=None, description="Only events ending after this instant"),
    end: datetime | None = Query(default=None, description="Only events starting before this instant"),
    services: ApplicationServices = Depends(get_services),
) -> list[EventRead]:
    """Return the events sorted by start time."""

    try:
        events = list_events_uc(services.events, range_start=start, range_end=end)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [_to_read_model(event) for event in events]


@router.post("/", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_in: EventCreate,
    services: ApplicationServices = Depends(get_services),
) -> EventRead:
    try:
        event = create_event_uc(
            services.events,
            title=event_in.title,
            start=event_in.start,
            end=event_in.end,
            description=event_in.description,
            type=event_in.type,
            priority=event_in.priority,
            reminder_enabled=event_in.reminder_enabled,
            reminder_minutes=event_in.reminder_minutes,
            default_reminder_minutes=services.settings.get().default_reminder_minutes,
            on_change=services.scheduler.notify_events_changed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_read_model(event)


@router.get("/{event_id}", response_model=EventRead)
async def read_event(
    event_id: str,
    services: ApplicationServices = Depends(get_services),
) -> EventRead:
    try:
        event = get_event_uc(services.events, event_id)
    except EventNotFoundError as exc:
        raise _not_found(exc) from exc
    return _to_read_model(event)


@router.patch("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: str,
    event_in: EventUpdate,
    services: ApplicationServices = Depends(get_services),
) -> EventRead:
    """Update the fields present in the payload."""

    changes = event_in.model_dump(exclude_unset=True)
    try:
        event = update_event_uc(
            services.events,
            event_id=event_id,
            on_change=services.scheduler.notify_events_changed,
            **changes,
        )
    except EventNotFoundError as exc:
        raise _not_found(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_read_model(event)


@router.post("/{event_id}/complete", response_model=EventRead)
async def toggle_completed(
    event_id: str,
    services: ApplicationServices = Depends(get_services),
) -> EventRead:
    """Flip the completed flag of the event."""

    try:
        event = toggle_event_completed_uc(
            services.events,
            event_id=event_id,
            on_change=services.scheduler.notify_events_changed,
        )
    except EventNotFoundError as exc:
        raise _not_found(exc) from exc
    return _to_read_model(event)


@router.post("/{event_id}/reminder/toggle", response_model=EventRead)
async def toggle_reminder(
    event_id: str,
    services: ApplicationServices = Depends(get_services),
) -> EventRead:
    try:
        event = toggle_event_reminder_uc(
            services.events,
            event_id=event_id,
            on_change=services.scheduler.notify_events_changed,
        )
    except EventNotFoundError as exc:
        raise _not_found(exc) from exc
    return _to_read_model(event)


@router.put("/{event_id}/reminder", response_model=EventRead)
async def set_reminder_minutes(
    event_id: str,
    payload: EventReminderUpdate,
    services: ApplicationServices = Depends(get_services),
) -> EventRead:
    """Set the lead time of the reminder and switch it on."""

    try:
        event = set_event_reminder_minutes_uc(
            services.events,
            event_id=event_id,
            minutes=payload.minutes,
            on_change=services.scheduler.notify_events_changed,
        )
    except EventNotFoundError as exc:
        raise _not_found(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_read_model(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    services: ApplicationServices = Depends(get_services),
) -> Response:
    try:
        delete_event_uc(
            services.events,
            event_id,
            on_change=services.scheduler.notify_events_changed,
        )
    except EventNotFoundError as exc:
        raise _not_found(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
