"""
Tests for the /auth endpoints.
"""
from tests.conftest import PASSWORD, user_payload


class TestRegisterApi:

    def test_register(self, client):
        resp = client.post("/api/v1/auth/register", json=user_payload(email="New@Example.com"))
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["email"] == "new@example.com"
        assert data["first_name"] == "Alice"
        assert data["is_email_verified"] is False
        assert "password" not in data
        assert "password_hash" not in data

    def test_register_validation(self, client):
        resp = client.post("/api/v1/auth/register", json=user_payload(password="short", phone_number="555"))
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "VALIDATION_ERROR"
        assert "password" in body["details"]
        assert "phone_number" in body["details"]

    def test_register_duplicate(self, client, user):
        resp = client.post("/api/v1/auth/register", json=user_payload(email=user.email))
        assert resp.status_code == 409
        assert resp.get_json()["error"] == "CONFLICT"


class TestLoginApi:

    def test_login(self, client, user):
        resp = client.post("/api/v1/auth/login", json={"email": user.email, "password": PASSWORD})
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["user"]["id"] == user.id
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["expires_in"] == 900

    def test_bad_credentials(self, client, user):
        resp = client.post("/api/v1/auth/login", json={"email": user.email, "password": "wrong-one"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "UNAUTHORIZED"

    def test_missing_fields(self, client):
        resp = client.post("/api/v1/auth/login", json={})
        assert resp.status_code == 400


class TestRefreshAndLogoutApi:

    def test_refresh(self, client, user, login):
        tokens = login(user.email)
        resp = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert resp.status_code == 200
        new_access = resp.get_json()["data"]["access_token"]

        me = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {new_access}"})
        assert me.status_code == 200

    def test_refresh_with_garbage(self, client):
        resp = client.post("/api/v1/auth/refresh", json={"refresh_token": "garbage"})
        assert resp.status_code == 401

    def test_logout_revokes_access_token(self, client, user, login):
        tokens = login(user.email)
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        assert client.post("/api/v1/auth/logout", headers=headers).status_code == 204

        resp = client.get("/api/v1/users/me", headers=headers)
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "UNAUTHORIZED"

        refreshed = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert refreshed.status_code == 401

    def test_logout_requires_auth(self, client):
        assert client.post("/api/v1/auth/logout").status_code == 401

    def test_refresh_token_is_not_an_access_token(self, client, user, login):
        tokens = login(user.email)
        resp = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
        assert resp.status_code == 401
