"""Periodic reminder evaluation bound to the running event loop."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Protocol

from lifestream.domain.entities import CalendarEvent
from lifestream.infrastructure.repositories import EventRepository
from lifestream.utils import now_in_app_timezone

from .evaluate import evaluate_reminders

logger = logging.getLogger(__name__)


class ReminderDispatch(Protocol):
    async def dispatch(self, event: CalendarEvent, *, now: datetime | None = None) -> object:
        ...


class ReminderScheduler:
    """Run the reminder evaluator every ``tick_seconds`` and dispatch due events.

    Each pass reads and writes the event store without awaiting in between,
    so nothing else on the loop can observe a half-applied ``notified`` update.
    Dispatch runs in background tasks and never delays the next tick.
    """

    def __init__(
        self,
        events: EventRepository,
        dispatcher: ReminderDispatch,
        *,
        tick_seconds: float = 5.0,
        shutdown_timeout: float = 10.0,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be greater than zero")
        self._events = events
        self._dispatcher = dispatcher
        self._tick_seconds = tick_seconds
        self._shutdown_timeout = shutdown_timeout
        self._clock = clock
        self._loop: asyncio.AbstractEventLoop | None = None
        self._timer: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[object]] = set()

    @property
    def tolerance(self) -> timedelta:
        return timedelta(seconds=self._tick_seconds)

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def run_once(self, now: datetime | None = None) -> list[CalendarEvent]:
        """Evaluate every event once and schedule dispatch for the due ones."""

        now = now or self._clock()
        evaluation = evaluate_reminders(self._events.list(), now=now, tolerance=self.tolerance)
        if evaluation.changed:
            self._events.replace_all(evaluation.events)
        for event in evaluation.rearmed:
            logger.debug("Reminder for event %s re-armed", event.id)
        for event in evaluation.due:
            logger.info("Reminder due for event %s (%s)", event.id, event.title)
            self._schedule_dispatch(event, now)
        return evaluation.due

    def start(self) -> None:
        """Start the periodic timer on the running loop; the first pass runs at once."""

        if self.running:
            return
        self._loop = asyncio.get_running_loop()
        self._timer = self._loop.create_task(self._run_forever())
        logger.info("Reminder scheduler started (every %.1f s)", self._tick_seconds)

    def notify_events_changed(self) -> None:
        """Request an extra pass after the event set changed.

        Safe to call from worker threads; does nothing while stopped.
        """

        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._safe_run_once)

    async def wait_for_dispatches(self) -> None:
        """Wait until every in-flight dispatch task has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel the timer, then give in-flight dispatches a bounded time to finish.

        Dispatches still running after ``shutdown_timeout`` seconds are cancelled.
        """

        timer, self._timer = self._timer, None
        self._loop = None
        if timer is not None:
            timer.cancel()
            try:
                await timer
            except asyncio.CancelledError:
                pass
        pending = set(self._tasks)
        if pending:
            _, unfinished = await asyncio.wait(pending, timeout=self._shutdown_timeout)
            for task in unfinished:
                task.cancel()
            if unfinished:
                logger.warning(
                    "Cancelled %s reminder dispatches still running after %.1f s",
                    len(unfinished),
                    self._shutdown_timeout,
                )
        logger.info("Reminder scheduler stopped")

    async def _run_forever(self) -> None:
        while True:
            self._safe_run_once()
            await asyncio.sleep(self._tick_seconds)

    def _safe_run_once(self) -> None:
        try:
            self.run_once()
        except Exception:
            logger.exception("Reminder evaluation pass failed")

    def _schedule_dispatch(self, event: CalendarEvent, now: datetime) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = self._loop
        if loop is None:
            logger.error("No event loop available to dispatch the reminder for event %s", event.id)
            return

        task = loop.create_task(self._dispatcher.dispatch(event, now=now))
        self._tasks.add(task)
        task.add_done_callback(self._on_dispatch_done)

    def _on_dispatch_done(self, task: asyncio.Task[object]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Reminder dispatch failed", exc_info=exc)


__all__ = ["ReminderScheduler"]
