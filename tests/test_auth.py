"""Tests for seller registration, login and session handling."""

from datetime import timedelta

from core.config import settings
from services.auth import create_access_token, verify_token


def register(client, email="new@example.com", password="secret123", full_name="New Seller"):
    return client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "full_name": full_name,
    })


class TestRegister:

    def test_register_opens_session(self, client):
        response = register(client)

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["seller"]["email"] == "new@example.com"
        assert settings.SESSION_COOKIE_NAME in response.cookies

        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "new@example.com"

    def test_duplicate_email(self, client, seller):
        response = register(client, email="OWNER@example.com")
        assert response.status_code == 400

    def test_weak_password(self, client):
        assert register(client, password="short1").status_code == 422
        assert register(client, password="lettersonly").status_code == 422


class TestLogin:

    def test_login_returns_token_and_cookie(self, client, seller):
        response = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "password123"})

        assert response.status_code == 200
        token = response.json()["access_token"]
        assert verify_token(token).email == "owner@example.com"
        assert response.cookies.get(settings.SESSION_COOKIE_NAME) == token

    def test_wrong_password(self, client, seller):
        response = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "wrongpass1"})
        assert response.status_code == 401

    def test_inactive_seller_cannot_log_in(self, client, make_seller):
        make_seller(email="gone@example.com", is_active=False)
        response = client.post("/api/auth/login", json={"email": "gone@example.com", "password": "password123"})
        assert response.status_code == 401


class TestCurrentSeller:

    def test_bearer_token(self, client, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["email"] == "owner@example.com"

    def test_missing_session(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_invalid_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_expired_token(self, client, seller):
        token = create_access_token(
            {"sub": seller.email, "seller_id": seller.id}, expires_delta=timedelta(minutes=-5)
        )
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_inactive_seller_is_forbidden(self, client, make_seller, headers_for):
        inactive = make_seller(email="paused@example.com", is_active=False)
        response = client.get("/api/auth/me", headers=headers_for(inactive))
        assert response.status_code == 403

    def test_signout_clears_cookie(self, client):
        register(client)

        response = client.post("/api/auth/signout")

        assert response.status_code == 200
        assert settings.SESSION_COOKIE_NAME in response.headers.get("set-cookie", "")
