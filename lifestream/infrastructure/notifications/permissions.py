"""Tracking of the client's desktop notification permission."""

from __future__ import annotations

import logging
from typing import Callable

from lifestream.domain.entities import DesktopPermission

logger = logging.getLogger(__name__)


class DesktopPermissionTracker:
    """Remember the tri-state permission reported by the calendar client.

    A denial is reported to ``on_denied`` once; the notice is re-armed only
    after the permission leaves the ``denied`` state.
    """

    def __init__(
        self,
        state: DesktopPermission = DesktopPermission.DEFAULT,
        *,
        on_denied: Callable[[], object] | None = None,
    ) -> None:
        self._state = state
        self._on_denied = on_denied
        self._denial_reported = False

    @property
    def state(self) -> DesktopPermission:
        return self._state

    def update(self, state: DesktopPermission) -> bool:
        """Store ``state``; return whether it changed."""

        changed = state is not self._state
        self._state = state
        if state is not DesktopPermission.DENIED:
            self._denial_reported = False
        if changed:
            logger.info("Desktop notification permission is now '%s'", state.value)
        return changed

    def report_denial_once(self) -> bool:
        if self._state is not DesktopPermission.DENIED or self._denial_reported:
            return False
        self._denial_reported = True
        if self._on_denied is not None:
            try:
                self._on_denied()
            except Exception:
                logger.exception("Failed to record the desktop permission notice")
        return True


__all__ = ["DesktopPermissionTracker"]
