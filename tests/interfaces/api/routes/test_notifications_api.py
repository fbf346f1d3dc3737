"""Tests for the notification, settings and permission routes."""

from __future__ import annotations


def test_startup_records_calendar_ready(client):
    [notification] = client.get("/notifications/").json()

    assert notification["title"] == "Calendar ready"
    assert notification["type"] == "system"
    assert notification["is_read"] is False
    assert client.get("/notifications/unread-count").json() == {"unread": 1}


def test_read_and_delete_notifications(client):
    notification_id = client.get("/notifications/").json()[0]["id"]

    first = client.post(f"/notifications/{notification_id}/read")
    again = client.post(f"/notifications/{notification_id}/read")
    assert first.json()["is_read"] is True
    assert again.status_code == 200
    assert client.get("/notifications/unread-count").json() == {"unread": 0}
    assert client.post("/notifications/missing/read").status_code == 404

    assert client.delete(f"/notifications/{notification_id}").status_code == 204
    assert client.delete(f"/notifications/{notification_id}").status_code == 204
    assert client.get("/notifications/").json() == []


def test_bulk_operations(client):
    client.patch("/settings/reminders", json={"default_reminder_minutes": 5})

    assert client.get("/notifications/", params={"unread_only": True, "limit": 1}).json()[0][
        "title"
    ] == "Reminder settings updated"
    assert client.post("/notifications/read-all").json() == {"affected": 2}
    assert client.delete("/notifications/").json() == {"affected": 2}
    assert client.delete("/notifications/").json() == {"affected": 0}


def test_settings_round_trip(client):
    response = client.patch(
        "/settings/reminders",
        json={
            "channels": {"email": {"enabled": True, "options": {"recipient": "me@example.com"}}},
            "max_history_items": 10,
        },
    )

    assert response.status_code == 200
    settings = client.get("/settings/reminders").json()
    assert settings["channels"]["email"] == {
        "enabled": True,
        "options": {"recipient": "me@example.com"},
    }
    assert settings["max_history_items"] == 10
    assert settings["channels"]["sound"]["options"] == {"sound": "chime"}


def test_invalid_settings_are_rejected_without_changes(client):
    before = client.get("/settings/reminders").json()

    negative = client.patch("/settings/reminders", json={"max_history_items": -1})
    bad_channel = client.patch(
        "/settings/reminders", json={"channels": {"sound": {"enabled": None}}}
    )

    assert negative.status_code == 422
    assert bad_channel.status_code == 400
    assert client.get("/settings/reminders").json() == before


def test_desktop_permission_round_trip(client):
    assert client.get("/reminders/desktop-permission").json() == {"state": "default"}

    response = client.put("/reminders/desktop-permission", json={"state": "granted"})

    assert response.json() == {"state": "granted"}
    assert client.put("/reminders/desktop-permission", json={"state": "maybe"}).status_code == 422


def test_websocket_sends_unread_snapshot_and_handles_ack(client):
    with client.websocket_connect("/notifications/ws") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        [pending] = init["data"]
        assert pending["title"] == "Calendar ready"

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_json({"type": "ack", "ids": [pending["id"]]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert client.get("/notifications/unread-count").json() == {"unread": 0}
