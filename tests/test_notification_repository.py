"""Tests for the bounded notification history."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from lifestream.domain.entities import Notification, NotificationType
from lifestream.infrastructure.repositories import NotificationRepository, trim_to_capacity

BASE = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def _notification(index: int, **overrides) -> Notification:
    values = {
        "id": f"n-{index}",
        "title": f"Title {index}",
        "message": "body",
        "type": NotificationType.INFO,
        "timestamp": BASE + timedelta(minutes=index),
    }
    values.update(overrides)
    return Notification(**values)


def _repository(store, cap=3):
    limits = {"cap": cap}
    repository = NotificationRepository(store, max_items=lambda: limits["cap"])
    return repository, limits


def test_appending_past_the_cap_keeps_the_most_recent(memory_store):
    repository, _ = _repository(memory_store, cap=3)

    for index in range(7):
        repository.add(_notification(index))

    assert [n.id for n in repository.list()] == ["n-6", "n-5", "n-4"]


def test_trim_uses_timestamps_not_insertion_order():
    shuffled = [_notification(i) for i in (2, 9, 0, 5, 7)]

    kept = trim_to_capacity(shuffled, 2)

    assert [n.id for n in kept] == ["n-9", "n-7"]


def test_zero_cap_disables_trimming(memory_store):
    repository, _ = _repository(memory_store, cap=0)

    for index in range(60):
        repository.add(_notification(index))

    assert len(repository.list()) == 60


def test_lowering_the_cap_applies_on_trim(memory_store):
    repository, limits = _repository(memory_store, cap=10)
    for index in range(6):
        repository.add(_notification(index))

    limits["cap"] = 2
    removed = repository.trim()

    assert removed == 4
    assert [n.id for n in repository.list()] == ["n-5", "n-4"]


def test_read_and_delete_operations_are_idempotent(memory_store):
    repository, _ = _repository(memory_store, cap=10)
    for index in range(3):
        repository.add(_notification(index))

    assert repository.mark_as_read("n-1") is True
    assert repository.mark_as_read("n-1") is False
    assert repository.mark_as_read("missing") is False
    assert repository.unread_count() == 2

    assert repository.mark_all_as_read() == 2
    assert repository.mark_all_as_read() == 0

    assert repository.delete("n-0") is True
    assert repository.delete("n-0") is False
    assert repository.delete_all() == 2
    assert repository.delete_all() == 0
    assert repository.list() == []


def test_list_filters_unread_and_limits(memory_store):
    repository, _ = _repository(memory_store, cap=10)
    for index in range(4):
        repository.add(_notification(index, is_read=index % 2 == 0))

    assert [n.id for n in repository.list(unread_only=True)] == ["n-3", "n-1"]
    assert [n.id for n in repository.list(limit=1)] == ["n-3"]


def test_history_survives_a_reload(memory_store):
    repository, _ = _repository(memory_store, cap=10)
    repository.add(_notification(1, type=NotificationType.REMINDER, related_event_id="evt-1"))
    repository.mark_as_read("n-1")

    reloaded, _ = _repository(memory_store, cap=10)
    [notification] = reloaded.load()

    assert notification.type is NotificationType.REMINDER
    assert notification.related_event_id == "evt-1"
    assert notification.is_read is True
    assert notification.timestamp == BASE + timedelta(minutes=1)


def test_unreadable_stored_entries_are_skipped(memory_store):
    memory_store.save(
        "lifestream_notifications",
        [
            {"id": "ok", "title": "t", "message": "m", "type": "bogus", "timestamp": BASE.isoformat()},
            {"id": "bad-ts", "title": "t", "message": "m", "type": "info", "timestamp": "yesterday"},
            "garbage",
        ],
    )
    repository, _ = _repository(memory_store, cap=10)

    [notification] = repository.load()

    assert notification.id == "ok"
    assert notification.type is NotificationType.INFO
