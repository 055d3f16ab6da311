from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.utils.dates import utcnow
from tests.utils.auth import get_user_authentication_headers
from tests.utils.event import create_random_event, create_session, default_category_id
from tests.utils.user import create_organizer, create_random_user


def _event_payload(db: Session) -> dict:
    start = utcnow() + timedelta(days=14)
    return {
        "title": "Quantum Computing Conference",
        "description": "Two days of talks on quantum algorithms",
        "start_date": start.isoformat() + "Z",
        "end_date": (start + timedelta(days=1)).isoformat() + "Z",
        "location": "Science Building",
        "category_id": default_category_id(db),
        "max_capacity": 120,
        "requires_certificate": True,
        "tags": ["quantum", "physics"],
    }


def test_organizer_creates_event(client: TestClient, db: Session) -> None:
    organizer = create_organizer(db)

    response = client.post(
        "/api/v1/events",
        headers=get_user_authentication_headers(organizer),
        json=_event_payload(db),
    )

    assert response.status_code == 201
    content = response.json()
    assert content["organizer_id"] == organizer.id
    assert content["current_registrations"] == 0
    assert content["tags"] == ["quantum", "physics"]


def test_participant_cannot_create_event(client: TestClient, db: Session) -> None:
    user = create_random_user(db)

    response = client.post(
        "/api/v1/events",
        headers=get_user_authentication_headers(user),
        json=_event_payload(db),
    )

    assert response.status_code == 403
    assert response.json()["success"] is False
    assert response.json()["error"] == "FORBIDDEN"


def test_end_before_start_is_invalid(client: TestClient, db: Session) -> None:
    payload = _event_payload(db)
    payload["end_date"], payload["start_date"] = payload["start_date"], payload["end_date"]

    response = client.post(
        "/api/v1/events",
        headers=get_user_authentication_headers(create_organizer(db)),
        json=payload,
    )

    assert response.status_code == 422


def test_list_events_is_public(client: TestClient, db: Session) -> None:
    organizer = create_organizer(db)
    create_random_event(db, organizer.id, title="Public Lecture")
    create_random_event(db, organizer.id, title="Past Lecture", start_date=utcnow() - timedelta(days=5))

    response = client.get("/api/v1/events")

    assert response.status_code == 200
    content = response.json()
    titles = [item["title"] for item in content["data"]]
    assert titles == ["Public Lecture"]
    assert content["pagination"]["total"] == 1
    assert content["data"][0]["registration_status"] == "available"
    assert content["data"][0]["organizer"]["id"] == organizer.id


def test_get_event_with_sessions(client: TestClient, db: Session) -> None:
    event = create_random_event(db, create_organizer(db).id)
    create_session(db, event, title="Opening Keynote")

    response = client.get(f"/api/v1/events/{event.id}")

    assert response.status_code == 200
    content = response.json()
    assert content["event_status"] == "upcoming"
    assert [s["title"] for s in content["sessions"]] == ["Opening Keynote"]
    assert content["user_registration"] is None


def test_get_missing_event(client: TestClient) -> None:
    response = client.get("/api/v1/events/evt_missing")
    assert response.status_code == 404
    assert response.json()["error"] == "EVENT_NOT_FOUND"


def test_categories(client: TestClient) -> None:
    response = client.get("/api/v1/categories")
    assert response.status_code == 200
    assert len(response.json()) >= 5
