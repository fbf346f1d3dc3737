"""Domain entities describing the user's reminder policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

CHANNEL_DESKTOP = "desktop"
CHANNEL_IN_APP = "in_app"
CHANNEL_SOUND = "sound"
CHANNEL_EMAIL = "email"

DEFAULT_REMINDER_MINUTES = 15
DEFAULT_MAX_HISTORY_ITEMS = 50
DEFAULT_SOUND = "chime"


class DesktopPermission(str, Enum):
    """Tri-state platform permission for desktop alerts."""

    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


@dataclass
class ChannelSettings:
    """Enablement flag plus channel-specific options (sound name, recipient...)."""

    enabled: bool
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReminderSettings:
    """Process-wide reminder configuration edited by the user."""

    channels: dict[str, ChannelSettings] = field(default_factory=dict)
    default_reminder_minutes: int = DEFAULT_REMINDER_MINUTES
    max_history_items: int = DEFAULT_MAX_HISTORY_ITEMS

    def is_channel_enabled(self, name: str) -> bool:
        channel = self.channels.get(name)
        return bool(channel and channel.enabled)

    def channel_options(self, name: str) -> dict[str, Any]:
        channel = self.channels.get(name)
        return dict(channel.options) if channel else {}

    def enabled_channels(self) -> list[str]:
        return [name for name, channel in self.channels.items() if channel.enabled]


def default_reminder_settings() -> ReminderSettings:
    """Return the settings used before the user changes anything."""

    return ReminderSettings(
        channels={
            CHANNEL_DESKTOP: ChannelSettings(enabled=True),
            CHANNEL_IN_APP: ChannelSettings(enabled=True),
            CHANNEL_SOUND: ChannelSettings(enabled=True, options={"sound": DEFAULT_SOUND}),
            CHANNEL_EMAIL: ChannelSettings(enabled=False, options={"recipient": None}),
        },
        default_reminder_minutes=DEFAULT_REMINDER_MINUTES,
        max_history_items=DEFAULT_MAX_HISTORY_ITEMS,
    )


__all__ = [
    "CHANNEL_DESKTOP",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_SOUND",
    "ChannelSettings",
    "DEFAULT_MAX_HISTORY_ITEMS",
    "DEFAULT_REMINDER_MINUTES",
    "DEFAULT_SOUND",
    "DesktopPermission",
    "ReminderSettings",
    "default_reminder_settings",
]
