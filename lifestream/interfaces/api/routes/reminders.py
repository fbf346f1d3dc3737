"""Routes for the reminder loop and the desktop notification permission."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from lifestream.application.services import ApplicationServices
from lifestream.interfaces.api.dependencies import get_services
from lifestream.interfaces.api.schemas import DesktopPermissionPayload, ReminderCheckResponse

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("/desktop-permission", response_model=DesktopPermissionPayload)
async def read_desktop_permission(
    services: ApplicationServices = Depends(get_services),
) -> DesktopPermissionPayload:
    return DesktopPermissionPayload(state=services.permission.state)


@router.put("/desktop-permission", response_model=DesktopPermissionPayload)
async def update_desktop_permission(
    payload: DesktopPermissionPayload,
    services: ApplicationServices = Depends(get_services),
) -> DesktopPermissionPayload:
    """Store the permission the browser reported for desktop alerts."""

    services.permission.update(payload.state)
    return DesktopPermissionPayload(state=services.permission.state)


@router.post("/check", response_model=ReminderCheckResponse)
async def check_reminders(
    services: ApplicationServices = Depends(get_services),
) -> ReminderCheckResponse:
    """Run one evaluation pass now and return the ids of the events that fired."""

    due = services.scheduler.run_once()
    return ReminderCheckResponse(due_event_ids=[event.id for event in due])
