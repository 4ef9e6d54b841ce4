from datetime import timedelta

from jose import jwt

from app.core.config import settings
from app.core.security import create_access_token

API = "/api/v1/auth"
PASSWORD = "Secret123"


def test_register_returns_user_and_token(client):
    response = client.post(
        f"{API}/register",
        json={"name": "Misato", "email": "Misato@Example.com", "password": "Katsuragi1"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "misato@example.com"
    assert body["user"]["name"] == "Misato"
    assert body["user"]["has_profile_photo"] is False
    assert body["token_type"] == "bearer"

    payload = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == body["user"]["id"]
    assert payload["email"] == "misato@example.com"


def test_register_duplicate_email_conflicts(client, user):
    response = client.post(
        f"{API}/register",
        json={"name": "Someone", "email": user.email.upper(), "password": "Another123"},
    )
    assert response.status_code == 409


def test_register_rejects_weak_password(client):
    for password in ["short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"]:
        response = client.post(
            f"{API}/register",
            json={"name": "Kaji", "email": "kaji@example.com", "password": password},
        )
        assert response.status_code == 422, password


def test_register_rejects_short_name(client):
    response = client.post(
        f"{API}/register",
        json={"name": "K", "email": "kaji@example.com", "password": "Ryoji1234"},
    )
    assert response.status_code == 422


def test_login_with_valid_credentials(client, user):
    response = client.post(f"{API}/login", json={"email": user.email, "password": PASSWORD})

    assert response.status_code == 200
    assert response.json()["user"]["id"] == user.id
    assert response.json()["access_token"]


def test_login_with_wrong_password(client, user):
    response = client.post(f"{API}/login", json={"email": user.email, "password": "Wrong1234"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_with_unknown_email(client):
    response = client.post(f"{API}/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert response.status_code == 401


def test_login_inactive_user(client, db, user):
    user.is_active = False
    db.commit()

    response = client.post(f"{API}/login", json={"email": user.email, "password": PASSWORD})
    assert response.status_code == 401


def test_validate_token(client, user, auth_headers):
    response = client.get(f"{API}/validate-token", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["valid"] is True
    assert response.json()["user_id"] == user.id


def test_garbage_token_is_unauthorized(client):
    response = client.get(f"{API}/validate-token", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_expired_token_is_unauthorized(client, user):
    token = create_access_token(user.id, expires_delta=timedelta(minutes=-5))
    response = client.get(f"{API}/validate-token", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
