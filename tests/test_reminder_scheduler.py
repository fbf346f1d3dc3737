"""Tests for the reminder scheduler running against the real stores."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from lifestream.application.use_cases.events import create_event, update_event
from lifestream.application.use_cases.reminders import ReminderScheduler
from lifestream.domain.entities import NotificationType
from lifestream.utils import now_in_app_timezone


def _reminders(services):
    return [n for n in services.notifications.list() if n.type is NotificationType.REMINDER]


@pytest.mark.anyio
async def test_end_to_end_reminder_lifecycle(services, t0):
    """Create at T-20, tick at T-16, T-14, T-10 and T+1 minutes."""

    event = create_event(
        services.events,
        title="Dentist",
        start=t0,
        reminder_minutes=15,
        default_reminder_minutes=services.settings.get().default_reminder_minutes,
    )
    scheduler = services.scheduler

    assert scheduler.run_once(t0 - timedelta(minutes=16)) == []
    await scheduler.wait_for_dispatches()
    assert services.events.get(event.id).notified is False
    assert _reminders(services) == []

    due = scheduler.run_once(t0 - timedelta(minutes=14))
    await scheduler.wait_for_dispatches()
    assert [e.id for e in due] == [event.id]
    assert services.events.get(event.id).notified is True
    reminders = _reminders(services)
    assert len(reminders) == 1
    assert reminders[0].related_event_id == event.id
    assert reminders[0].title == "Dentist"

    assert scheduler.run_once(t0 - timedelta(minutes=10)) == []
    await scheduler.wait_for_dispatches()
    assert len(_reminders(services)) == 1
    assert services.events.get(event.id).notified is True

    assert scheduler.run_once(t0 + timedelta(minutes=1)) == []
    await scheduler.wait_for_dispatches()
    assert services.events.get(event.id).notified is False
    assert len(_reminders(services)) == 1


@pytest.mark.anyio
async def test_notified_flag_is_committed_before_dispatch_runs(services, event_factory, t0):
    class BlockingDispatcher:
        def __init__(self):
            self.seen = []

        async def dispatch(self, event, *, now=None):
            self.seen.append(services.events.get(event.id).notified)

    services.events.add(event_factory())
    dispatcher = BlockingDispatcher()
    scheduler = ReminderScheduler(services.events, dispatcher, tick_seconds=5)

    scheduler.run_once(t0 - timedelta(minutes=5))
    assert services.events.get("evt-1").notified is True
    await scheduler.wait_for_dispatches()

    assert dispatcher.seen == [True]


@pytest.mark.anyio
async def test_failing_dispatch_does_not_reset_notified(services, event_factory, t0, caplog):
    class ExplodingDispatcher:
        async def dispatch(self, event, *, now=None):
            raise RuntimeError("boom")

    services.events.add(event_factory())
    scheduler = ReminderScheduler(services.events, ExplodingDispatcher(), tick_seconds=5)

    scheduler.run_once(t0 - timedelta(minutes=5))
    await scheduler.wait_for_dispatches()

    assert services.events.get("evt-1").notified is True
    assert "Reminder dispatch failed" in caplog.text


@pytest.mark.anyio
async def test_pass_persists_events_only_when_flags_change(services, memory_store, event_factory, t0):
    services.events.add(event_factory())
    saves_after_add = memory_store.saves

    services.scheduler.run_once(t0 - timedelta(hours=2))
    assert memory_store.saves == saves_after_add

    services.scheduler.run_once(t0 - timedelta(minutes=5))
    await services.scheduler.wait_for_dispatches()
    stored = memory_store.load("lifestream_events")
    assert stored[0]["notified"] is True


@pytest.mark.anyio
async def test_start_runs_a_pass_and_stop_cancels_timer(services, event_factory):
    clock_calls = []

    def clock():
        clock_calls.append(True)
        return now_in_app_timezone()

    scheduler = ReminderScheduler(
        services.events, services.dispatcher, tick_seconds=60, clock=clock
    )
    scheduler.start()
    assert scheduler.running is True
    scheduler.start()
    await _yield_to_loop()

    await scheduler.stop()

    assert scheduler.running is False
    assert len(clock_calls) == 1


@pytest.mark.anyio
async def test_notify_events_changed_runs_an_extra_pass(services):
    calls = []

    def clock():
        calls.append(True)
        return now_in_app_timezone()

    scheduler = ReminderScheduler(
        services.events, services.dispatcher, tick_seconds=60, clock=clock
    )
    scheduler.notify_events_changed()
    assert calls == []

    scheduler.start()
    await _yield_to_loop()
    before = len(calls)
    scheduler.notify_events_changed()
    await _yield_to_loop()
    await scheduler.stop()

    assert len(calls) == before + 1


@pytest.mark.anyio
async def test_editing_only_the_end_does_not_fire_again(services, memory_store, t0):
    memory_store.save(
        "lifestream_events",
        [
            {
                "id": "legacy",
                "title": "Call mom",
                "start": "2024-05-01T09:00:00.000Z",
                "end": "2024-05-01T10:00:00.000Z",
                "reminderMinutes": 15,
            }
        ],
    )
    services.events.load()
    scheduler = services.scheduler

    assert [e.id for e in scheduler.run_once(t0 - timedelta(minutes=14))] == ["legacy"]
    await scheduler.wait_for_dispatches()

    edited = update_event(services.events, event_id="legacy", end="2024-05-01T11:00:00+00:00")

    assert edited.notified is True
    assert scheduler.run_once(t0 - timedelta(minutes=13)) == []
    await scheduler.wait_for_dispatches()
    assert len(_reminders(services)) == 1


class HangingDispatcher:
    def __init__(self):
        self.started = 0
        self.cancelled = 0

    async def dispatch(self, event, *, now=None):
        self.started += 1
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise


@pytest.mark.anyio
async def test_hanging_dispatch_does_not_delay_the_next_tick(services, event_factory, t0):
    calls = []

    def clock():
        calls.append(True)
        return t0 - timedelta(minutes=5)

    services.events.add(event_factory())
    dispatcher = HangingDispatcher()
    scheduler = ReminderScheduler(
        services.events, dispatcher, tick_seconds=0.01, shutdown_timeout=0, clock=clock
    )

    scheduler.start()
    await asyncio.sleep(0.2)
    await scheduler.stop()
    await _yield_to_loop()

    assert dispatcher.started == 1
    assert len(calls) >= 3


@pytest.mark.anyio
async def test_stop_cancels_dispatches_that_never_finish(services, event_factory, t0, caplog):
    services.events.add(event_factory())
    dispatcher = HangingDispatcher()
    scheduler = ReminderScheduler(
        services.events, dispatcher, tick_seconds=5, shutdown_timeout=0.05
    )

    scheduler.run_once(t0 - timedelta(minutes=5))
    await _yield_to_loop()
    await asyncio.wait_for(scheduler.stop(), timeout=2)
    await _yield_to_loop()

    assert dispatcher.cancelled == 1
    assert "Cancelled 1 reminder dispatches" in caplog.text
    assert services.events.get("evt-1").notified is True


def test_tick_must_be_positive(services):
    with pytest.raises(ValueError):
        ReminderScheduler(services.events, services.dispatcher, tick_seconds=0)


async def _yield_to_loop():
    for _ in range(3):
        await asyncio.sleep(0)
