"""Routes for reading and editing the reminder settings."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from lifestream.application.services import ApplicationServices
from lifestream.application.use_cases.settings import update_reminder_settings
from lifestream.interfaces.api.dependencies import get_services
from lifestream.interfaces.api.schemas import ReminderSettingsRead, ReminderSettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/reminders", response_model=ReminderSettingsRead)
async def read_reminder_settings(
    services: ApplicationServices = Depends(get_services),
) -> ReminderSettingsRead:
    return ReminderSettingsRead.from_entity(services.settings.get())


@router.patch("/reminders", response_model=ReminderSettingsRead)
async def patch_reminder_settings(
    payload: ReminderSettingsUpdate,
    services: ApplicationServices = Depends(get_services),
) -> ReminderSettingsRead:
    """Apply a partial update to the reminder settings."""

    try:
        updated = update_reminder_settings(
            services.settings,
            services.notifications,
            patch=payload.to_patch(),
            publisher=services.publisher,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ReminderSettingsRead.from_entity(updated)
