import pytest
from fastapi.testclient import TestClient

from portal.db.session import get_db
from portal.main import create_app
from portal.models.base import EntityKind
from portal.repositories.record_store import SqlAlchemyRecordStore

REVIEWER_HEADERS = {"X-Caller-Identity": "reviewer@portal.example.org", "X-Caller-Role": "reviewer"}
ORGANIZER_HEADERS = {
    "X-Caller-Identity": "lead@chess-club.example.org",
    "X-Caller-Role": "organization",
    "X-Organization-Id": "1",
}


@pytest.fixture
def client(session_factory) -> TestClient:
    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def submitted(client, reservation_date, rooms):
    response = client.post(
        "/api/v1/reservations",
        json={
            "kind": "room",
            "reservation_date": reservation_date.isoformat(),
            "start_time": "10:00",
            "end_time": "11:30",
            "attendee_count": 25,
            "requester_name": "Ana Souza",
            "requester_phone": "+55 11 99999-0000",
            "organization_id": 1,
        },
        headers=ORGANIZER_HEADERS,
    )
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_submit_and_approve(client, submitted):
    response = client.post(
        f"/api/v1/reservations/{submitted['id']}/approve",
        json={"comment": "ok", "room_id": 7},
        headers=REVIEWER_HEADERS,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "approved"
    assert body["event_id"]
    assert body["room_id"] == 7
    assert "X-Request-ID" in response.headers


def test_second_reject_conflicts(client, submitted):
    url = f"/api/v1/reservations/{submitted['id']}/reject"

    assert client.post(url, json={"comment": "no budget"}, headers=REVIEWER_HEADERS).status_code == 200
    second = client.post(url, json={"comment": "no budget"}, headers=REVIEWER_HEADERS)

    assert second.status_code == 409
    assert second.json()["detail"]["code"] == "INVALID_TRANSITION"


def test_approve_forbidden_for_organizer(client, submitted):
    response = client.post(
        f"/api/v1/reservations/{submitted['id']}/approve",
        json={},
        headers=ORGANIZER_HEADERS,
    )

    assert response.status_code == 403


def test_missing_caller_headers(client, submitted):
    response = client.post(f"/api/v1/reservations/{submitted['id']}/cancel", json={})

    assert response.status_code == 401


def test_cancel_and_unknown(client, submitted):
    cancelled = client.post(
        f"/api/v1/reservations/{submitted['id']}/cancel",
        json={"reason": "Event postponed"},
        headers=ORGANIZER_HEADERS,
    )
    missing = client.post("/api/v1/reservations/unknown/cancel", json={}, headers=ORGANIZER_HEADERS)

    assert cancelled.json()["cancellation_reason"] == "Event postponed"
    assert missing.status_code == 404


def test_capacity_check(client, rooms):
    response = client.get("/api/v1/rooms/8/capacity-check", params={"attendees": 30})

    assert response.status_code == 200
    assert response.json()["valid"] is False


def test_approve_with_location_then_unlink_and_relink(client, submitted, session_factory):
    base = f"/api/v1/reservations/{submitted['id']}"
    approved = client.post(f"{base}/approve", json={"location": "Main hall"}, headers=REVIEWER_HEADERS)
    event_id = approved.json()["event_id"]

    db = session_factory()
    try:
        assert SqlAlchemyRecordStore(db).read(EntityKind.EVENT, event_id).location == "Main hall"
    finally:
        db.close()

    unlinked = client.post(f"{base}/unlink-event", headers=REVIEWER_HEADERS)
    assert unlinked.status_code == 200
    assert unlinked.json()["event_id"] is None

    relinked = client.post(f"{base}/link-event", json={"event_id": event_id}, headers=REVIEWER_HEADERS)
    assert relinked.status_code == 200
    assert relinked.json()["event_id"] == event_id


def test_link_event_forbidden_for_organizer(client, submitted):
    response = client.post(
        f"/api/v1/reservations/{submitted['id']}/link-event",
        json={"event_id": "some-event"},
        headers=ORGANIZER_HEADERS,
    )

    assert response.status_code == 403
