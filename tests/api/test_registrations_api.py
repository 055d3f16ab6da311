from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.utils.dates import utcnow
from tests.utils.auth import get_user_authentication_headers
from tests.utils.event import create_random_event, create_session
from tests.utils.user import create_organizer, create_random_user


def test_register_for_event(client: TestClient, db: Session) -> None:
    event = create_random_event(db, create_organizer(db).id, max_capacity=2)
    session = create_session(db, event)
    headers = get_user_authentication_headers(create_random_user(db))

    response = client.post(
        f"/api/v1/events/{event.id}/register",
        headers=headers,
        json={"session_ids": [session.id]},
    )

    assert response.status_code == 201
    content = response.json()
    assert content["registration"]["status"] == "registered"
    assert content["available_slots"] == 1
    assert [s["id"] for s in content["sessions"]] == [session.id]
    assert content["qr_data"]["type"] == "event_registration"


def test_register_without_body(client: TestClient, db: Session) -> None:
    event = create_random_event(db, create_organizer(db).id)
    headers = get_user_authentication_headers(create_random_user(db))

    response = client.post(f"/api/v1/events/{event.id}/register", headers=headers)

    assert response.status_code == 201


def test_fail_to_register_twice(client: TestClient, db: Session) -> None:
    event = create_random_event(db, create_organizer(db).id)
    headers = get_user_authentication_headers(create_random_user(db))

    first = client.post(f"/api/v1/events/{event.id}/register", headers=headers, json={})
    assert first.status_code == 201

    second = client.post(f"/api/v1/events/{event.id}/register", headers=headers, json={})
    assert second.status_code == 409
    assert second.json()["error"] == "ALREADY_REGISTERED"


def test_full_event(client: TestClient, db: Session) -> None:
    event = create_random_event(db, create_organizer(db).id, max_capacity=1)
    client.post(
        f"/api/v1/events/{event.id}/register",
        headers=get_user_authentication_headers(create_random_user(db)),
    )

    response = client.post(
        f"/api/v1/events/{event.id}/register",
        headers=get_user_authentication_headers(create_random_user(db)),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "EVENT_FULL"


def test_cancel_registration(client: TestClient, db: Session) -> None:
    event = create_random_event(db, create_organizer(db).id)
    headers = get_user_authentication_headers(create_random_user(db))
    registration_id = client.post(
        f"/api/v1/events/{event.id}/register", headers=headers
    ).json()["registration"]["id"]

    response = client.request(
        "DELETE",
        f"/api/v1/registrations/{registration_id}",
        headers=headers,
        json={"reason": "Cannot attend anymore"},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["cancellation_reason"] == "Cannot attend anymore"


def test_check_in_outside_event_window(client: TestClient, db: Session) -> None:
    organizer = create_organizer(db)
    event = create_random_event(db, organizer.id, start_date=utcnow() + timedelta(days=1))
    registration_id = client.post(
        f"/api/v1/events/{event.id}/register",
        headers=get_user_authentication_headers(create_random_user(db)),
    ).json()["registration"]["id"]

    response = client.post(
        f"/api/v1/registrations/{registration_id}/check-in",
        headers=get_user_authentication_headers(organizer),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "NOT_IN_PROGRESS"


def test_event_registrations_listing_is_organizer_only(client: TestClient, db: Session) -> None:
    organizer = create_organizer(db)
    participant = create_random_user(db)
    event = create_random_event(db, organizer.id)
    client.post(
        f"/api/v1/events/{event.id}/register",
        headers=get_user_authentication_headers(participant),
    )

    forbidden = client.get(
        f"/api/v1/events/{event.id}/registrations",
        headers=get_user_authentication_headers(participant),
    )
    assert forbidden.status_code == 403

    response = client.get(
        f"/api/v1/events/{event.id}/registrations",
        headers=get_user_authentication_headers(organizer),
    )
    assert response.status_code == 200
    content = response.json()
    assert content["statistics"]["registered"] == 1
    assert content["data"][0]["user"]["id"] == participant.id


def test_my_registrations(client: TestClient, db: Session) -> None:
    participant = create_random_user(db)
    headers = get_user_authentication_headers(participant)
    event = create_random_event(db, create_organizer(db).id)
    client.post(f"/api/v1/events/{event.id}/register", headers=headers)

    response = client.get(f"/api/v1/users/{participant.id}/registrations", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"][0]["event"]["id"] == event.id
