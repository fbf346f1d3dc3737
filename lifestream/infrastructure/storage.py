"""Key-value blob persistence for the in-memory stores."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifestream.infrastructure.models import BlobModel

logger = logging.getLogger(__name__)

EVENTS_KEY = "lifestream_events"
NOTIFICATIONS_KEY = "lifestream_notifications"
REMINDER_SETTINGS_KEY = "lifestream_reminder_settings"


class BlobStore(Protocol):
    """Minimal contract used by the repositories to persist their state."""

    def load(self, key: str, default: Any = None) -> Any:
        """Return the last saved value for ``key`` or ``default``."""

    def save(self, key: str, value: Any) -> bool:
        """Persist ``value`` under ``key``; never raises."""


class SqlBlobStore:
    """Store JSON documents in the ``app_blob`` table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def load(self, key: str, default: Any = None) -> Any:
        try:
            with self._session_factory() as session:
                model = session.get(BlobModel, key)
                raw_value = model.value if model is not None else None
        except SQLAlchemyError:
            logger.exception("Failed to load blob '%s'", key)
            return default

        if raw_value is None:
            return default
        try:
            return json.loads(raw_value)
        except json.JSONDecodeError:
            logger.error("Stored blob '%s' is not valid JSON; using defaults", key)
            return default

    def save(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.exception("Failed to serialize blob '%s'", key)
            return False

        try:
            with self._session_factory() as session:
                model = session.get(BlobModel, key)
                if model is None:
                    session.add(BlobModel(key=key, value=payload))
                else:
                    model.value = payload
                session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to save blob '%s'", key)
            return False
        return True


__all__ = [
    "BlobStore",
    "SqlBlobStore",
    "EVENTS_KEY",
    "NOTIFICATIONS_KEY",
    "REMINDER_SETTINGS_KEY",
]
