from datetime import timedelta
from unittest.mock import create_autospec

from fastapi.testclient import TestClient

from app.api.deps import get_store
from app.core.security import TokenService
from app.errors import DomainValidationError
from app.main import app
from app.repositories.base import Store


# ============================================================================
# LOGIN TESTS
# ============================================================================


def test_login_creates_account(client):
    """Test first login signs the volunteer up and returns a token."""
    response = client.post(
        "/v1/volunteers/login",
        json={"email": "new@example.com", "password": "secret"},
    )
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert data["volunteer"] == {"email": "new@example.com"}


def test_login_existing_account(client, volunteer: dict, tokens: TokenService):
    """Test login with the password used at sign-up."""
    response = client.post(
        "/v1/volunteers/login",
        json={"email": volunteer["email"], "password": volunteer["password"]},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    assert tokens.email_from_token(token) == volunteer["email"]


def test_login_wrong_password(client, volunteer: dict):
    """Test login with wrong password."""
    response = client.post(
        "/v1/volunteers/login",
        json={"email": volunteer["email"], "password": "WrongPassword"},
    )
    assert response.status_code == 401
    data = response.json()
    assert data["code"] == "UNAUTHORIZED"
    assert "access_token" not in data


def test_login_missing_password(client):
    response = client.post("/v1/volunteers/login", json={"email": "new@example.com"})
    assert response.status_code == 422


def test_login_empty_email(client):
    response = client.post(
        "/v1/volunteers/login",
        json={"email": "", "password": "secret"},
    )
    assert response.status_code == 422


def test_login_password_too_long(client):
    """Test passwords bcrypt would truncate are refused before the store."""
    response = client.post(
        "/v1/volunteers/login",
        json={"email": "long@example.com", "password": "a" * 73},
    )
    assert response.status_code == 422

    response = client.post(
        "/v1/volunteers/login",
        json={"email": "long@example.com", "password": "a" * 72},
    )
    assert response.status_code == 200


def test_login_password_with_nul_character(client):
    response = client.post(
        "/v1/volunteers/login",
        json={"email": "nul@example.com", "password": "a\u0000b"},
    )
    assert response.status_code == 422


def test_login_store_validation_error(tokens: TokenService):
    store = create_autospec(Store, instance=True)
    store.authenticate_or_create.side_effect = DomainValidationError(
        "Password must not contain NUL characters"
    )
    app.dependency_overrides[get_store] = lambda: store
    try:
        response = TestClient(app).post(
            "/v1/volunteers/login",
            json={"email": "me@example.com", "password": "secret"},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 422
    assert response.json() == {
        "detail": "Password must not contain NUL characters",
        "code": "VALIDATION_ERROR",
    }


# ============================================================================
# GET CURRENT VOLUNTEER TESTS
# ============================================================================


def test_get_me(client, auth_headers: dict, volunteer: dict):
    """Test getting current volunteer info with valid token."""
    response = client.get("/v1/volunteers/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"email": volunteer["email"]}


def test_get_me_with_login_token(client):
    token = client.post(
        "/v1/volunteers/login",
        json={"email": "me@example.com", "password": "secret"},
    ).json()["access_token"]

    response = client.get(
        "/v1/volunteers/me",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 200
    assert response.json() == {"email": "me@example.com"}


def test_get_me_without_token(client):
    """Test getting current volunteer without token fails."""
    response = client.get("/v1/volunteers/me")
    assert response.status_code == 401


def test_get_me_invalid_token(client):
    """Test getting current volunteer with invalid token fails."""
    response = client.get(
        "/v1/volunteers/me",
        headers={"Authorization": "Bearer invalid_token"},
    )
    assert response.status_code == 401
    assert "Could not validate credentials" in response.json()["detail"]


def test_get_me_expired_token(client, tokens: TokenService, volunteer: dict):
    token = tokens.create_access_token(volunteer["email"], expires_delta=timedelta(seconds=-1))

    response = client.get(
        "/v1/volunteers/me",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401


def test_get_me_unknown_volunteer(client, tokens: TokenService):
    """Test a valid token for an account the store does not know."""
    token = tokens.create_access_token("ghost@example.com")

    response = client.get(
        "/v1/volunteers/me",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
