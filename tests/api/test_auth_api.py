from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import settings
from tests.utils.user import DEFAULT_PASSWORD, create_random_user, random_email


def test_register_sets_refresh_cookie(client: TestClient) -> None:
    data = {
        "name": "Ana Torres",
        "email": random_email(),
        "password": "Secret123",
        "password_confirm": "Secret123",
    }

    response = client.post("/api/v1/auth/register", json=data)

    assert response.status_code == 201
    content = response.json()
    assert content["user"]["email"] == data["email"]
    assert content["user"]["role_id"] == settings.DEFAULT_ROLE_ID
    assert content["token_type"] == "bearer"
    assert settings.REFRESH_COOKIE_NAME in response.cookies


def test_register_validates_password(client: TestClient) -> None:
    data = {
        "name": "Ana Torres",
        "email": random_email(),
        "password": "weakpass",
        "password_confirm": "weakpass",
    }

    response = client.post("/api/v1/auth/register", json=data)

    assert response.status_code == 422


def test_login_and_refresh(client: TestClient, db: Session) -> None:
    user = create_random_user(db)

    response = client.post(
        "/api/v1/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == user.id

    # The refresh cookie set by login is sent back automatically
    refreshed = client.post("/api/v1/auth/refresh")
    assert refreshed.status_code == 200
    assert refreshed.json()["access_token"]


def test_inactive_account_cannot_login(client: TestClient, db: Session) -> None:
    user = create_random_user(db, is_active=False)

    response = client.post(
        "/api/v1/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "INVALID_CREDENTIALS",
        "message": "Invalid credentials",
        "details": None,
    }


def test_refresh_without_cookie(client: TestClient) -> None:
    response = client.post("/api/v1/auth/refresh")
    assert response.status_code == 401
    assert response.json()["error"] == "INVALID_REFRESH_TOKEN"


def test_protected_endpoint_requires_token(client: TestClient) -> None:
    response = client.get("/api/v1/profile")
    assert response.status_code == 401


def test_health(client: TestClient) -> None:
    assert client.get("/api/v1/health").json()["status"] == "healthy"
    assert client.get("/api/v1/health/db").status_code == 200
