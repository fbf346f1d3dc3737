"""Persistence and patching of the reminder settings singleton."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from lifestream.domain.entities import (
    ChannelSettings,
    ReminderSettings,
    default_reminder_settings,
)
from lifestream.infrastructure.storage import REMINDER_SETTINGS_KEY, BlobStore

logger = logging.getLogger(__name__)

_PATCHABLE_FIELDS = frozenset({"channels", "default_reminder_minutes", "max_history_items"})


def _non_negative_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{name}' must be an integer")
    if value < 0:
        raise ValueError(f"'{name}' must be zero or greater")
    return value


def _apply_channel_patch(
    channels: dict[str, ChannelSettings], patch: Any
) -> dict[str, ChannelSettings]:
    if not isinstance(patch, Mapping):
        raise ValueError("'channels' must be an object keyed by channel name")

    merged = copy.deepcopy(channels)
    for name, channel_patch in patch.items():
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Channel names must be non-empty strings")
        if not isinstance(channel_patch, Mapping):
            raise ValueError(f"Settings for channel '{name}' must be an object")
        unknown = set(channel_patch) - {"enabled", "options"}
        if unknown:
            raise ValueError(
                f"Unknown settings for channel '{name}': {', '.join(sorted(unknown))}"
            )

        current = merged.get(name) or ChannelSettings(enabled=False)
        enabled = channel_patch.get("enabled", current.enabled)
        if not isinstance(enabled, bool):
            raise ValueError(f"'enabled' for channel '{name}' must be a boolean")
        options = dict(current.options)
        raw_options = channel_patch.get("options")
        if raw_options is not None:
            if not isinstance(raw_options, Mapping):
                raise ValueError(f"'options' for channel '{name}' must be an object")
            options.update(raw_options)
        merged[name] = ChannelSettings(enabled=enabled, options=options)
    return merged


def apply_settings_patch(
    settings: ReminderSettings, patch: Mapping[str, Any]
) -> ReminderSettings:
    """Return a new :class:`ReminderSettings` with ``patch`` applied.

    The whole patch is validated before anything changes; any invalid field
    raises ``ValueError`` and ``settings`` is left untouched.
    """

    unknown = set(patch) - _PATCHABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown reminder settings: {', '.join(sorted(unknown))}")

    updated = copy.deepcopy(settings)
    if "channels" in patch:
        updated.channels = _apply_channel_patch(settings.channels, patch["channels"])
    if "default_reminder_minutes" in patch:
        updated.default_reminder_minutes = _non_negative_int(
            "default_reminder_minutes", patch["default_reminder_minutes"]
        )
    if "max_history_items" in patch:
        updated.max_history_items = _non_negative_int(
            "max_history_items", patch["max_history_items"]
        )
    return updated


class ReminderSettingsRepository:
    """Hold the process-wide :class:`ReminderSettings` and persist every change."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store
        self._settings = default_reminder_settings()

    def load(self) -> ReminderSettings:
        raw = self._store.load(REMINDER_SETTINGS_KEY, None)
        settings = default_reminder_settings()
        if isinstance(raw, Mapping):
            settings = self._merge_stored(settings, raw)
        elif raw is not None:
            logger.warning("Stored reminder settings are not an object; using defaults")
        self._settings = settings
        return self.get()

    def get(self) -> ReminderSettings:
        return copy.deepcopy(self._settings)

    @property
    def max_history_items(self) -> int:
        return self._settings.max_history_items

    def update(self, patch: Mapping[str, Any]) -> ReminderSettings:
        self._settings = apply_settings_patch(self._settings, patch)
        self.save()
        return self.get()

    def save(self) -> bool:
        return self._store.save(REMINDER_SETTINGS_KEY, self._to_record(self._settings))

    @staticmethod
    def _to_record(settings: ReminderSettings) -> dict[str, Any]:
        return {
            "channels": {
                name: {"enabled": channel.enabled, "options": dict(channel.options)}
                for name, channel in settings.channels.items()
            },
            "default_reminder_minutes": settings.default_reminder_minutes,
            "max_history_items": settings.max_history_items,
        }

    @staticmethod
    def _merge_stored(
        settings: ReminderSettings, raw: Mapping[str, Any]
    ) -> ReminderSettings:
        # Apply stored fields one by one so a single bad value keeps its default.
        for field_name in _PATCHABLE_FIELDS:
            if field_name not in raw:
                continue
            try:
                settings = apply_settings_patch(settings, {field_name: raw[field_name]})
            except ValueError as exc:
                logger.warning("Ignoring stored reminder setting '%s': %s", field_name, exc)
        return settings


__all__ = ["ReminderSettingsRepository", "apply_settings_patch"]
