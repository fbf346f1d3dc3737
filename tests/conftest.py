"""Shared fixtures for the test-suite."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)
os.environ.pop("REMINDER_SOUND_COMMAND", None)

import pytest

from lifestream.config import reset_settings_cache

reset_settings_cache()

from lifestream.application.services import ApplicationServices, build_services  # noqa: E402
from lifestream.domain.entities import CalendarEvent  # noqa: E402
from lifestream.infrastructure.notifications import ReminderMessage  # noqa: E402


class MemoryBlobStore:
    """Blob store keeping JSON text in a dict, like the SQL table does."""

    def __init__(self) -> None:
        self.blobs: dict[str, str] = {}
        self.saves = 0

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self.blobs:
            return default
        return json.loads(self.blobs[key])

    def save(self, key: str, value: Any) -> bool:
        self.blobs[key] = json.dumps(value)
        self.saves += 1
        return True


class RecordingSoundPlayer:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.played: list[str] = []

    async def __call__(self, sound: str, message: ReminderMessage) -> bool:
        self.played.append(sound)
        return self.result


async def no_sleep(_: float) -> None:
    return None


T0 = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def make_event(**overrides: Any) -> CalendarEvent:
    values: dict[str, Any] = {
        "id": "evt-1",
        "title": "Standup",
        "start": T0.isoformat(),
        "end": T0.replace(hour=10).isoformat(),
        "reminder_minutes": 15,
    }
    values.update(overrides)
    return CalendarEvent(**values)


@pytest.fixture
def t0() -> datetime:
    return T0


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def memory_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def sound_player() -> RecordingSoundPlayer:
    return RecordingSoundPlayer()


@pytest.fixture
def services(memory_store: MemoryBlobStore, sound_player: RecordingSoundPlayer) -> ApplicationServices:
    built = build_services(memory_store, sound_player=sound_player, sleep=no_sleep)
    built.load()
    return built
