"""Schemas for calendar event endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from lifestream.domain.entities import EventType, Priority


class EventCreate(BaseModel):
    """Payload required to create an event; ``end`` defaults to one hour later."""

    title: str = Field(..., min_length=1)
    start: datetime
    end: datetime | None = None
    description: str | None = None
    type: str | None = Field(default=None, description="WORK, PERSONAL, URGENT or OTHER")
    priority: str | None = Field(default=None, description="LOW, MEDIUM or HIGH")
    reminder_enabled: bool = True
    reminder_minutes: int | None = Field(default=None, ge=0)


class EventUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    start: datetime | None = None
    end: datetime | None = None
    description: str | None = None
    type: str | None = None
    priority: str | None = None
    is_completed: bool | None = None
    reminder_enabled: bool | None = None
    reminder_minutes: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class EventReminderUpdate(BaseModel):
    minutes: int = Field(..., ge=0, description="Lead time in minutes; 0 fires at the start")


class EventRead(BaseModel):
    id: str
    title: str
    description: str
    start: str
    end: str
    type: EventType
    priority: Priority
    is_completed: bool
    reminder_enabled: bool
    reminder_minutes: int
    notified: bool

    model_config = ConfigDict(from_attributes=True)


__all__ = ["EventCreate", "EventRead", "EventReminderUpdate", "EventUpdate"]
