"""Routes for natural-language event creation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from lifestream.application.services import ApplicationServices
from lifestream.application.use_cases.events import create_events_from_text
from lifestream.infrastructure.openai_client import EventExtractionService, OpenAIServiceError
from lifestream.interfaces.api.dependencies import get_event_extraction_service, get_services
from lifestream.interfaces.api.schemas import (
    AssistantMessageRequest,
    AssistantMessageResponse,
    EventRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/messages", response_model=AssistantMessageResponse)
async def create_events_from_message(
    payload: AssistantMessageRequest,
    services: ApplicationServices = Depends(get_services),
    assistant: EventExtractionService = Depends(get_event_extraction_service),
) -> AssistantMessageResponse:
    """Create the events described in the user's message."""

    try:
        result = await create_events_from_text(
            services.events,
            assistant,
            text=payload.message,
            default_reminder_minutes=services.settings.get().default_reminder_minutes,
            view_date=payload.view_date,
            on_change=services.scheduler.notify_events_changed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except OpenAIServiceError as exc:
        logger.warning("Event extraction failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return AssistantMessageResponse(
        message=result.message,
        events=[EventRead.model_validate(event) for event in result.events],
    )
