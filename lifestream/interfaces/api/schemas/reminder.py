"""Schemas for reminder settings and desktop permission endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from lifestream.domain.entities import DesktopPermission, ReminderSettings


class ChannelSettingsSchema(BaseModel):
    enabled: bool
    options: dict[str, Any] = Field(default_factory=dict)


class ChannelSettingsPatch(BaseModel):
    enabled: bool | None = None
    options: dict[str, Any] | None = None

    model_config = ConfigDict(extra="forbid")


class ReminderSettingsRead(BaseModel):
    channels: dict[str, ChannelSettingsSchema]
    default_reminder_minutes: int
    max_history_items: int

    @classmethod
    def from_entity(cls, settings: ReminderSettings) -> "ReminderSettingsRead":
        return cls(
            channels={
                name: ChannelSettingsSchema(enabled=channel.enabled, options=dict(channel.options))
                for name, channel in settings.channels.items()
            },
            default_reminder_minutes=settings.default_reminder_minutes,
            max_history_items=settings.max_history_items,
        )


class ReminderSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    channels: dict[str, ChannelSettingsPatch] | None = None
    default_reminder_minutes: int | None = Field(default=None, ge=0)
    max_history_items: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")

    def to_patch(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class DesktopPermissionPayload(BaseModel):
    state: DesktopPermission


class ReminderCheckResponse(BaseModel):
    due_event_ids: list[str]


__all__ = [
    "ChannelSettingsPatch",
    "ChannelSettingsSchema",
    "DesktopPermissionPayload",
    "ReminderCheckResponse",
    "ReminderSettingsRead",
    "ReminderSettingsUpdate",
]
