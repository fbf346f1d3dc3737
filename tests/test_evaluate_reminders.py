"""Tests for the pure reminder evaluation function."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from lifestream.application.use_cases.reminders import evaluate_reminders, reminder_window

TICK = timedelta(seconds=5)


@pytest.mark.parametrize("offset_minutes", [-15, -10, -1, -0.01])
def test_event_inside_window_is_due_and_marked(event_factory, t0, offset_minutes):
    """Any instant in ``[start - lead, start)`` fires the reminder once."""

    event = event_factory()
    now = t0 + timedelta(minutes=offset_minutes)

    evaluation = evaluate_reminders([event], now=now, tolerance=TICK)

    assert [e.id for e in evaluation.due] == [event.id]
    assert evaluation.events[0].notified is True
    assert event.notified is False


@pytest.mark.parametrize("offset_minutes", [-16, -15.01, 0, 1])
def test_event_outside_window_is_not_due(event_factory, t0, offset_minutes):
    event = event_factory()

    evaluation = evaluate_reminders(
        [event], now=t0 + timedelta(minutes=offset_minutes), tolerance=TICK
    )

    assert evaluation.due == []
    assert evaluation.events[0].notified is False
    assert evaluation.changed is False


def test_second_pass_without_changes_fires_nothing(event_factory, t0):
    now = t0 - timedelta(minutes=14)
    first = evaluate_reminders([event_factory()], now=now, tolerance=TICK)

    second = evaluate_reminders(first.events, now=now, tolerance=TICK)

    assert len(first.due) == 1
    assert second.due == []
    assert second.events[0].notified is True
    assert second.changed is False


def test_disabled_reminders_are_left_untouched(event_factory, t0):
    disabled = event_factory(reminder_enabled=False)
    disabled_notified = event_factory(id="evt-2", reminder_enabled=False, notified=True)

    evaluation = evaluate_reminders(
        [disabled, disabled_notified], now=t0 + timedelta(hours=2), tolerance=TICK
    )

    assert evaluation.due == []
    assert evaluation.events == [disabled, disabled_notified]


def test_elapsed_notified_event_is_rearmed_and_fires_after_reschedule(event_factory, t0):
    """Past the window the flag clears; moving the event forward fires it again."""

    fired = event_factory(notified=True)
    rearmed = evaluate_reminders([fired], now=t0 + timedelta(minutes=1), tolerance=TICK)
    assert rearmed.due == []
    assert rearmed.events[0].notified is False
    assert rearmed.changed is True

    moved = rearmed.events[0]
    moved.start = (t0 + timedelta(minutes=20)).isoformat()
    again = evaluate_reminders([moved], now=t0 + timedelta(minutes=6), tolerance=TICK)

    assert [e.id for e in again.due] == [moved.id]


def test_notified_flag_before_window_is_cleared(event_factory, t0):
    stale = event_factory(notified=True)

    evaluation = evaluate_reminders([stale], now=t0 - timedelta(hours=1), tolerance=TICK)

    assert evaluation.due == []
    assert evaluation.events[0].notified is False


def test_any_started_notified_event_is_rearmed(event_factory, t0):
    """Known edge case: re-arm does not check whether the start actually moved.

    A notified event that has already started is cleared on the next pass even
    though nothing about it changed. It does not fire again because its window
    is over, but the flag no longer records that it fired.
    """

    untouched = event_factory(notified=True)

    evaluation = evaluate_reminders([untouched], now=t0, tolerance=TICK)

    assert evaluation.events[0].notified is False
    assert evaluation.due == []


def test_zero_lead_fires_within_one_tick_after_start(event_factory, t0):
    event = event_factory(reminder_minutes=0)

    before = evaluate_reminders([event], now=t0 - timedelta(seconds=1), tolerance=TICK)
    at_start = evaluate_reminders([event], now=t0, tolerance=TICK)
    late_in_tick = evaluate_reminders([event], now=t0 + timedelta(seconds=4), tolerance=TICK)
    after_tick = evaluate_reminders([event], now=t0 + timedelta(seconds=5), tolerance=TICK)

    assert before.due == []
    assert len(at_start.due) == 1
    assert len(late_in_tick.due) == 1
    assert after_tick.due == []


def test_zero_lead_is_not_refired_inside_its_window(event_factory, t0):
    fired = evaluate_reminders(
        [event_factory(reminder_minutes=0)], now=t0 + timedelta(seconds=1), tolerance=TICK
    )

    second = evaluate_reminders(fired.events, now=t0 + timedelta(seconds=3), tolerance=TICK)

    assert second.due == []
    assert second.events[0].notified is True


def test_tick_longer_than_lead_widens_the_window(event_factory, t0):
    """With a two minute tick a one minute lead still gets a full tick to fire."""

    event = event_factory(reminder_minutes=1)
    tick = timedelta(minutes=2)

    fire_at, window_end = reminder_window(t0, 1, tick)
    evaluation = evaluate_reminders([event], now=t0 + timedelta(seconds=30), tolerance=tick)

    assert fire_at == t0 - timedelta(minutes=1)
    assert window_end == t0 + timedelta(minutes=1)
    assert len(evaluation.due) == 1


@pytest.mark.parametrize("start", ["", "not-a-date", "2024-13-45T99:00:00"])
def test_malformed_start_is_skipped_with_warning(event_factory, t0, caplog, start):
    event = event_factory(start=start)

    with caplog.at_level(logging.WARNING):
        evaluation = evaluate_reminders([event], now=t0, tolerance=TICK)

    assert evaluation.due == []
    assert evaluation.events == [event]
    assert evaluation.events[0].notified is False
    assert "malformed event" in caplog.text


def test_event_without_title_is_skipped(event_factory, t0):
    event = event_factory(title="")

    evaluation = evaluate_reminders([event], now=t0 - timedelta(minutes=5), tolerance=TICK)

    assert evaluation.due == []
    assert evaluation.events[0].notified is False


def test_naive_start_is_read_in_app_timezone(event_factory, t0):
    event = event_factory(start="2024-05-01T09:00:00")

    evaluation = evaluate_reminders([event], now=t0 - timedelta(minutes=5), tolerance=TICK)

    assert len(evaluation.due) == 1


def test_order_of_events_is_preserved(event_factory, t0):
    events = [
        event_factory(id="a", start=(t0 + timedelta(hours=3)).isoformat()),
        event_factory(id="b"),
        event_factory(id="c", start="broken"),
    ]

    evaluation = evaluate_reminders(events, now=t0 - timedelta(minutes=5), tolerance=TICK)

    assert [e.id for e in evaluation.events] == ["a", "b", "c"]
    assert [e.id for e in evaluation.due] == ["b"]
