"""Tests for the event and assistant routes."""

from __future__ import annotations

import types
from datetime import timedelta

from lifestream.domain.entities import ProposedEvent
from lifestream.infrastructure.openai_client import EventExtraction, OpenAIServiceError
from lifestream.interfaces.api.dependencies import get_event_extraction_service
from lifestream.utils import now_in_app_timezone


def _create(client, **overrides):
    payload = {"title": "Team sync", "start": "2024-05-01T09:00:00+00:00"}
    payload.update(overrides)
    return client.post("/events/", json=payload)


def test_create_and_read_event(client):
    response = _create(client, type="work", priority="LOW", description="Agenda")

    assert response.status_code == 201
    created = response.json()
    assert created["end"] == "2024-05-01T10:00:00+00:00"
    assert created["type"] == "WORK"
    assert created["priority"] == "LOW"
    assert created["reminder_minutes"] == 15
    assert created["notified"] is False

    fetched = client.get(f"/events/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created


def test_default_lead_time_follows_settings(client):
    client.patch("/settings/reminders", json={"default_reminder_minutes": 30})

    created = _create(client).json()

    assert created["reminder_minutes"] == 30


def test_invalid_event_is_rejected(client):
    response = _create(client, end="2024-05-01T08:00:00+00:00")

    assert response.status_code == 400
    assert client.get("/events/").json() == []


def test_list_filters_by_range(client):
    _create(client, title="Monday", start="2024-05-06T09:00:00+00:00")
    _create(client, title="Friday", start="2024-05-10T09:00:00+00:00")

    response = client.get(
        "/events/",
        params={"start": "2024-05-09T00:00:00+00:00", "end": "2024-05-11T00:00:00+00:00"},
    )

    assert [event["title"] for event in response.json()] == ["Friday"]


def test_update_toggle_and_delete(client):
    event_id = _create(client).json()["id"]

    updated = client.patch(f"/events/{event_id}", json={"title": "Renamed", "priority": "high"})
    assert updated.status_code == 200
    assert updated.json()["title"] == "Renamed"
    assert updated.json()["priority"] == "HIGH"

    completed = client.post(f"/events/{event_id}/complete")
    assert completed.json()["is_completed"] is True

    toggled = client.post(f"/events/{event_id}/reminder/toggle")
    assert toggled.json()["reminder_enabled"] is False

    minutes = client.put(f"/events/{event_id}/reminder", json={"minutes": 0})
    assert minutes.json()["reminder_enabled"] is True
    assert minutes.json()["reminder_minutes"] == 0

    assert client.delete(f"/events/{event_id}").status_code == 204
    assert client.get(f"/events/{event_id}").status_code == 404
    assert client.delete(f"/events/{event_id}").status_code == 404


def test_unknown_fields_are_rejected_on_update(client):
    event_id = _create(client).json()["id"]

    response = client.patch(f"/events/{event_id}", json={"notified": True})

    assert response.status_code == 422


def test_reminder_check_fires_due_event_once(client):
    start = now_in_app_timezone() + timedelta(minutes=10)
    event_id = _create(client, start=start.isoformat()).json()["id"]

    first = client.post("/reminders/check")
    second = client.post("/reminders/check")

    assert first.json() == {"due_event_ids": [event_id]}
    assert second.json() == {"due_event_ids": []}
    assert client.get(f"/events/{event_id}").json()["notified"] is True


class FakeExtractor:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def extract(self, transcript, *, current_events=(), view_date=None, now=None):
        if self.error is not None:
            raise self.error
        return self.result


def test_assistant_creates_events(app, client):
    extractor = FakeExtractor(
        EventExtraction(
            events=[ProposedEvent(title="Dinner", start="2024-05-01T19:00:00+00:00", type="PERSONAL")],
            message="Dinner booked",
        )
    )
    app.dependency_overrides[get_event_extraction_service] = lambda: extractor

    response = client.post("/assistant/messages", json={"message": "dinner at 7"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Dinner booked"
    assert [event["title"] for event in body["events"]] == ["Dinner"]
    assert len(client.get("/events/").json()) == 1


def test_assistant_maps_model_failures_to_bad_gateway(app, client):
    app.dependency_overrides[get_event_extraction_service] = lambda: FakeExtractor(
        error=OpenAIServiceError("The model reply is not valid JSON.")
    )

    response = client.post("/assistant/messages", json={"message": "dinner at 7"})

    assert response.status_code == 502


def test_assistant_without_api_key_is_unavailable(client, monkeypatch):
    settings = types.SimpleNamespace(
        openai_api_key=None, openai_base_url=None, openai_model="m", openai_temperature=0.7
    )
    monkeypatch.setattr("lifestream.infrastructure.openai_client.get_settings", lambda: settings)

    response = client.post("/assistant/messages", json={"message": "dinner at 7"})

    assert response.status_code == 503
