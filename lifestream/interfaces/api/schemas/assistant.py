"""Pydantic models for the assistant interaction endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .event import EventRead


class AssistantMessageRequest(BaseModel):
    """Payload with the user's free-form message."""

    message: str = Field(..., min_length=1, description="Text to turn into calendar events")
    view_date: datetime | None = Field(
        default=None, description="Date of the calendar page the user is looking at"
    )


class AssistantMessageResponse(BaseModel):
    message: str
    events: list[EventRead] = Field(default_factory=list)


__all__ = ["AssistantMessageRequest", "AssistantMessageResponse"]
