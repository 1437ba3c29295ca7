"""
HTTP-level tests for the auth and profile routes.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.dependencies import get_auth_service
from api.middleware import CORRELATION_HEADER, register_middleware
from api.routes import router as api_router
from auth.dependencies import get_token_issuer
from auth.routes import router as auth_router


@pytest.fixture()
def client(auth_service, token_issuer) -> TestClient:
    app = FastAPI()
    register_middleware(app)
    app.include_router(auth_router, prefix="/api/v1/auth")
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_token_issuer] = lambda: token_issuer
    return TestClient(app)


def _register(client: TestClient, payload) -> dict:
    resp = client.post("/api/v1/auth/register", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()


def _login(client: TestClient, account="testuser", password="password123"):
    return client.post("/api/v1/auth/login", json={"account": account, "password": password})


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestAuthRoutes:
    def test_register_then_duplicate(self, client, register_payload):
        data = _register(client, register_payload)
        assert data["success"] is True
        assert data["user_id"] == 1

        resp = client.post("/api/v1/auth/register", json=register_payload)
        assert resp.status_code == 409
        detail = resp.json()["detail"]
        assert detail["error"] == "duplicate_identity"
        assert detail["field"] == "account"

    def test_register_password_mismatch(self, client, register_payload):
        resp = client.post(
            "/api/v1/auth/register",
            json={**register_payload, "confirm_password": "different"},
        )
        assert resp.status_code == 422

    def test_register_password_over_bcrypt_limit(self, client, register_payload):
        for password in ("p" * 100, "密碼" * 13):
            resp = client.post(
                "/api/v1/auth/register",
                json={**register_payload, "password": password, "confirm_password": password},
            )
            assert resp.status_code == 422, password

    def test_login_with_overlong_password_is_rejected(self, client, register_payload):
        _register(client, register_payload)

        resp = _login(client, password="p" * 100)

        assert resp.status_code == 401

    def test_register_blank_account_or_user_name(self, client, store, register_payload):
        for field in ("account", "user_name"):
            resp = client.post("/api/v1/auth/register", json={**register_payload, field: "    "})
            assert resp.status_code == 422, field
        assert store.users == {}

    def test_register_trims_identity_fields(self, client, store, register_payload):
        _register(client, {**register_payload, "account": "  testuser  ", "user_name": " Test User "})

        assert store.users[1].account == "testuser"
        assert store.users[1].user_name == "Test User"

    def test_login_success(self, client, register_payload):
        _register(client, register_payload)

        resp = _login(client)

        assert resp.status_code == 200
        data = resp.json()
        assert data["user_id"] == 1
        assert data["token"]
        assert data["token_type"] == "Bearer"

    def test_login_wrong_password(self, client, register_payload):
        _register(client, register_payload)

        resp = _login(client, password="wrongpassword")

        assert resp.status_code == 401
        assert resp.json()["detail"]["error"] == "invalid_credentials"

    def test_login_disabled_account(self, client, store, register_payload):
        _register(client, register_payload)
        store.users[1].is_active = False

        assert _login(client).status_code == 403

    def test_refresh(self, client, register_payload):
        _register(client, register_payload)
        refresh_token = _login(client).json()["refresh_token"]

        resp = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert resp.status_code == 200
        assert resp.json()["user_id"] == 1

        bad = client.post("/api/v1/auth/refresh", json={"refresh_token": "garbage"})
        assert bad.status_code == 401

    def test_profile_requires_token(self, client):
        resp = client.get("/api/v1/auth/profile")
        assert resp.status_code in (401, 403)

        resp = client.get("/api/v1/auth/profile", headers=_bearer("garbage"))
        assert resp.status_code == 401

    def test_profile_and_logout(self, client, register_payload):
        _register(client, register_payload)
        token = _login(client).json()["token"]

        resp = client.get("/api/v1/auth/profile", headers=_bearer(token))
        assert resp.status_code == 200
        profile = resp.json()
        assert profile["account"] == "testuser"
        assert profile["points"] == 0
        assert profile["last_login_at"] is not None

        resp = client.post("/api/v1/auth/logout", headers=_bearer(token))
        assert resp.json() == {"success": True}

    def test_profile_for_deleted_user(self, client, store, token_issuer):
        token = token_issuer.issue_access_token(999, "ghost").token

        resp = client.get("/api/v1/auth/profile", headers=_bearer(token))

        assert resp.status_code == 404


class TestUserRoutes:
    def test_get_other_profile_is_public_subset(self, client, register_payload):
        _register(client, register_payload)
        _register(client, {
            **register_payload,
            "account": "viewer", "user_name": "Viewer", "email": "viewer@example.com",
        })
        token = _login(client, account="viewer").json()["token"]

        resp = client.get("/api/v1/users/1/profile", headers=_bearer(token))

        assert resp.status_code == 200
        data = resp.json()
        assert data["user_id"] == 1
        assert data["nickname"] == "Test User"
        assert data["bio"] == "This is a test user"
        for private in ("account", "email", "cellphone", "address", "date_of_birth", "points"):
            assert private not in data
        assert client.get("/api/v1/users/999/profile", headers=_bearer(token)).status_code == 404

    def test_update_my_profile(self, client, register_payload):
        _register(client, register_payload)
        token = _login(client).json()["token"]

        resp = client.put(
            "/api/v1/users/me/profile",
            json={"nickname": "Neo", "date_of_birth": "1999-12-31"},
            headers=_bearer(token),
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["nickname"] == "Neo"
        assert data["date_of_birth"] == "1999-12-31"
        assert data["cellphone"] == "0912345678"

    def test_correlation_header_echoed(self, client):
        resp = client.get("/api/v1/auth/profile", headers={CORRELATION_HEADER: "abc123"})
        assert resp.headers[CORRELATION_HEADER] == "abc123"
