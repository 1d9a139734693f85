"""Tests for Event CRUD over the API and ownership isolation.

Covers:
- Event create / get / update / delete
- Server-assigned owner and id
- Field validation → 400
- Sparse updates
- Ordering of the list endpoint
- Ownership isolation between two users → 404
- Delete twice → 404
"""
from datetime import datetime
from tests.conftest import auth_headers, create_event, register_user


def _instant(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _setup(client):
    """Register two users, return their sessions."""
    alice = register_user(client, email="alice@example.com")
    bob = register_user(client, email="bob@example.com")
    return alice, bob


FULL_EVENT = {
    "title": "Dentist",
    "description": "Annual check-up",
    "startTime": "2024-03-05T14:00:00Z",
    "endTime": "2024-03-05T15:00:00Z",
    "location": "12 High Street",
    "color": "#ef4444",
    "reminderMinutes": 30,
    "recurrencePattern": "yearly",
    "recurrenceEndDate": "2030-03-05T00:00:00Z",
}


class TestEventCreate:

    def test_create_event_defaults(self, client):
        alice, _ = _setup(client)
        data = create_event(client, alice, title="Standup")
        assert data["title"] == "Standup"
        assert data["ownerId"] == alice["user"]["id"]
        assert data["color"] == "#3b82f6"
        assert data["reminderMinutes"] == 10
        assert data["recurrencePattern"] == "none"
        assert data["description"] is None
        assert data["recurrenceEndDate"] is None
        assert isinstance(data["id"], int)

    def test_create_then_get_preserves_fields(self, client):
        alice, _ = _setup(client)
        created = create_event(client, alice, **FULL_EVENT)

        resp = client.get(f"/api/events/{created['id']}", headers=auth_headers(alice))
        assert resp.status_code == 200
        fetched = resp.json()
        for field in ("title", "description", "location", "color", "reminderMinutes", "recurrencePattern"):
            assert fetched[field] == FULL_EVENT[field]
        for field in ("startTime", "endTime", "recurrenceEndDate"):
            assert _instant(fetched[field]) == _instant(FULL_EVENT[field])
        assert fetched["createdAt"] is not None

    def test_create_ignores_client_owner_and_id(self, client):
        alice, bob = _setup(client)
        data = create_event(client, alice, ownerId=bob["user"]["id"], userId=bob["user"]["id"], id=999)
        assert data["ownerId"] == alice["user"]["id"]
        assert data["id"] != 999

        bob_events = client.get("/api/events/", headers=auth_headers(bob)).json()
        assert bob_events == []

    def test_create_accepts_snake_case(self, client):
        alice, _ = _setup(client)
        resp = client.post("/api/events/", json={
            "title": "Gym",
            "start_time": "2024-01-08T07:00:00Z",
            "end_time": "2024-01-08T08:00:00Z",
            "reminder_minutes": 0,
        }, headers=auth_headers(alice))
        assert resp.status_code == 201
        assert resp.json()["reminderMinutes"] == 0

    def test_create_keeps_offset_instant(self, client):
        alice, _ = _setup(client)
        data = create_event(client, alice, startTime="2024-01-08T11:00:00+02:00", endTime="2024-01-08T12:00:00+02:00")
        assert _instant(data["startTime"]) == _instant("2024-01-08T09:00:00Z")

    def test_create_missing_title(self, client):
        alice, _ = _setup(client)
        resp = client.post("/api/events/", json={
            "startTime": "2024-01-08T09:00:00Z",
            "endTime": "2024-01-08T09:30:00Z",
        }, headers=auth_headers(alice))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
        assert "title" in resp.json()["error"]["message"]

    def test_create_blank_title(self, client):
        alice, _ = _setup(client)
        resp = client.post("/api/events/", json={
            "title": "   ",
            "startTime": "2024-01-08T09:00:00Z",
            "endTime": "2024-01-08T09:30:00Z",
        }, headers=auth_headers(alice))
        assert resp.status_code == 400

    def test_create_missing_times(self, client):
        alice, _ = _setup(client)
        resp = client.post("/api/events/", json={"title": "No time"}, headers=auth_headers(alice))
        assert resp.status_code == 400
        resp = client.post("/api/events/", json={
            "title": "Bad time", "startTime": "yesterday", "endTime": "2024-01-08T09:30:00Z",
        }, headers=auth_headers(alice))
        assert resp.status_code == 400

    def test_create_rejects_color_outside_palette(self, client):
        alice, _ = _setup(client)
        resp = client.post("/api/events/", json={
            "title": "Odd", "startTime": "2024-01-08T09:00:00Z", "endTime": "2024-01-08T09:30:00Z",
            "color": "#123456",
        }, headers=auth_headers(alice))
        assert resp.status_code == 400

    def test_create_rejects_negative_reminder(self, client):
        alice, _ = _setup(client)
        resp = client.post("/api/events/", json={
            "title": "Odd", "startTime": "2024-01-08T09:00:00Z", "endTime": "2024-01-08T09:30:00Z",
            "reminderMinutes": -5,
        }, headers=auth_headers(alice))
        assert resp.status_code == 400

    def test_create_rejects_unknown_recurrence(self, client):
        alice, _ = _setup(client)
        resp = client.post("/api/events/", json={
            "title": "Odd", "startTime": "2024-01-08T09:00:00Z", "endTime": "2024-01-08T09:30:00Z",
            "recurrencePattern": "hourly",
        }, headers=auth_headers(alice))
        assert resp.status_code == 400

    def test_create_rejects_overlong_title_and_location(self, client):
        alice, _ = _setup(client)
        base = {"startTime": "2024-01-08T09:00:00Z", "endTime": "2024-01-08T09:30:00Z"}
        long_title = client.post("/api/events/", json={**base, "title": "x" * 256}, headers=auth_headers(alice))
        assert long_title.status_code == 400
        assert "title" in long_title.json()["error"]["message"]

        long_location = client.post("/api/events/", json={**base, "title": "Ok", "location": "y" * 501},
                                    headers=auth_headers(alice))
        assert long_location.status_code == 400

        assert client.post("/api/events/", json={**base, "title": "x" * 255, "location": "y" * 500},
                           headers=auth_headers(alice)).status_code == 201

    def test_create_requires_token(self, client):
        resp = client.post("/api/events/", json=FULL_EVENT)
        assert resp.status_code == 401


class TestEventUpdate:

    def test_partial_update_keeps_other_fields(self, client):
        alice, _ = _setup(client)
        event = create_event(client, alice, **FULL_EVENT)

        resp = client.put(f"/api/events/{event['id']}", json={"title": "Dentist (moved)"}, headers=auth_headers(alice))
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Dentist (moved)"
        assert data["location"] == FULL_EVENT["location"]
        assert data["reminderMinutes"] == 30
        assert _instant(data["startTime"]) == _instant(FULL_EVENT["startTime"])

    def test_update_replaces_times(self, client):
        alice, _ = _setup(client)
        event = create_event(client, alice)
        resp = client.put(f"/api/events/{event['id']}", json={
            "startTime": "2024-01-09T10:00:00Z",
            "endTime": "2024-01-09T11:00:00Z",
        }, headers=auth_headers(alice))
        assert resp.status_code == 200
        assert _instant(resp.json()["startTime"]) == _instant("2024-01-09T10:00:00Z")

    def test_update_can_clear_optional_field(self, client):
        alice, _ = _setup(client)
        event = create_event(client, alice, **FULL_EVENT)
        resp = client.put(f"/api/events/{event['id']}", json={"description": None}, headers=auth_headers(alice))
        assert resp.status_code == 200
        assert resp.json()["description"] is None

    def test_update_cannot_clear_title(self, client):
        alice, _ = _setup(client)
        event = create_event(client, alice)
        resp = client.put(f"/api/events/{event['id']}", json={"title": None}, headers=auth_headers(alice))
        assert resp.status_code == 400

    def test_update_rejects_overlong_title(self, client):
        alice, _ = _setup(client)
        event = create_event(client, alice)
        resp = client.put(f"/api/events/{event['id']}", json={"title": "x" * 256}, headers=auth_headers(alice))
        assert resp.status_code == 400

    def test_update_ignores_owner_change(self, client):
        alice, bob = _setup(client)
        event = create_event(client, alice)
        resp = client.put(f"/api/events/{event['id']}", json={"ownerId": bob["user"]["id"], "title": "Mine"},
                          headers=auth_headers(alice))
        assert resp.status_code == 200
        assert resp.json()["ownerId"] == alice["user"]["id"]

    def test_last_write_wins(self, client):
        alice, _ = _setup(client)
        event = create_event(client, alice)
        client.put(f"/api/events/{event['id']}", json={"title": "First"}, headers=auth_headers(alice))
        client.put(f"/api/events/{event['id']}", json={"title": "Second"}, headers=auth_headers(alice))
        assert client.get(f"/api/events/{event['id']}", headers=auth_headers(alice)).json()["title"] == "Second"

    def test_update_missing_event(self, client):
        alice, _ = _setup(client)
        resp = client.put("/api/events/4242", json={"title": "Ghost"}, headers=auth_headers(alice))
        assert resp.status_code == 404


class TestEventDelete:

    def test_delete_then_delete_again(self, client):
        alice, _ = _setup(client)
        event = create_event(client, alice)

        first = client.delete(f"/api/events/{event['id']}", headers=auth_headers(alice))
        assert first.status_code == 200
        assert first.json() == {"ok": True}

        second = client.delete(f"/api/events/{event['id']}", headers=auth_headers(alice))
        assert second.status_code == 404
        assert second.json()["error"]["code"] == "NOT_FOUND"

        assert client.get(f"/api/events/{event['id']}", headers=auth_headers(alice)).status_code == 404


class TestEventList:

    def test_list_ordered_by_start_then_creation(self, client):
        alice, _ = _setup(client)
        late = create_event(client, alice, title="Late", startTime="2024-01-08T15:00:00Z", endTime="2024-01-08T16:00:00Z")
        tie_a = create_event(client, alice, title="Tie A", startTime="2024-01-08T10:00:00Z", endTime="2024-01-08T11:00:00Z")
        tie_b = create_event(client, alice, title="Tie B", startTime="2024-01-08T10:00:00Z", endTime="2024-01-08T10:30:00Z")
        early = create_event(client, alice, title="Early", startTime="2024-01-07T08:00:00Z", endTime="2024-01-07T09:00:00Z")

        resp = client.get("/api/events/", headers=auth_headers(alice))
        assert resp.status_code == 200
        assert [e["id"] for e in resp.json()] == [early["id"], tie_a["id"], tie_b["id"], late["id"]]

    def test_list_with_start_bounds(self, client):
        alice, _ = _setup(client)
        create_event(client, alice, title="Before", startTime="2024-01-01T09:00:00Z", endTime="2024-01-01T10:00:00Z")
        create_event(client, alice, title="Inside", startTime="2024-01-08T09:00:00Z", endTime="2024-01-08T10:00:00Z")
        create_event(client, alice, title="After", startTime="2024-02-01T09:00:00Z", endTime="2024-02-01T10:00:00Z")

        resp = client.get(
            "/api/events/",
            params={"startAfter": "2024-01-05T00:00:00Z", "startBefore": "2024-01-31T23:59:59Z"},
            headers=auth_headers(alice),
        )
        assert [e["title"] for e in resp.json()] == ["Inside"]

    def test_list_requires_token(self, client):
        assert client.get("/api/events/").status_code == 401


class TestOwnershipIsolation:
    """A user never sees or touches another user's events."""

    def test_list_only_own_events(self, client):
        alice, bob = _setup(client)
        create_event(client, alice, title="Alice's")
        create_event(client, bob, title="Bob's")

        alice_titles = [e["title"] for e in client.get("/api/events/", headers=auth_headers(alice)).json()]
        bob_titles = [e["title"] for e in client.get("/api/events/", headers=auth_headers(bob)).json()]
        assert alice_titles == ["Alice's"]
        assert bob_titles == ["Bob's"]

    def test_foreign_event_is_not_found(self, client):
        alice, bob = _setup(client)
        bobs = create_event(client, bob, title="Private")

        get_resp = client.get(f"/api/events/{bobs['id']}", headers=auth_headers(alice))
        missing = client.get("/api/events/987654", headers=auth_headers(alice))
        assert get_resp.status_code == missing.status_code == 404
        assert get_resp.json() == missing.json()

        assert client.put(f"/api/events/{bobs['id']}", json={"title": "Hijacked"},
                          headers=auth_headers(alice)).status_code == 404
        assert client.delete(f"/api/events/{bobs['id']}", headers=auth_headers(alice)).status_code == 404

        still_there = client.get(f"/api/events/{bobs['id']}", headers=auth_headers(bob)).json()
        assert still_there["title"] == "Private"
