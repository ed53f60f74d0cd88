"""
Shared fixtures.

APP_ENV must be set before `models` is imported: DBStorage picks the
in-memory SQLite engine at import time.
"""
import os

os.environ["APP_ENV"] = "test"

from datetime import date

import fakeredis
import pytest

from api import create_app
from models import storage, token_cache
from services.dumpster_service import dumpster_service
from services.user_service import user_service

PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def fresh_state():
    """Empty schema and token cache for every test."""
    storage.drop_all()
    storage.reload()
    token_cache.client = fakeredis.FakeRedis(decode_responses=True)
    token_cache.client.flushall()
    yield
    storage.close()


@pytest.fixture
def app():
    return create_app("testing")


@pytest.fixture
def client(app):
    return app.test_client()


def user_payload(email="alice@example.com", **overrides):
    payload = {
        "first_name": "Alice",
        "last_name": "Walker",
        "email": email,
        "password": PASSWORD,
        "phone_number": "+15551234567",
        "date_of_birth": "1990-05-17",
        "address": "1 Main St",
        "city": "Austin",
        "state": "TX",
        "zip_code": "73301",
    }
    payload.update(overrides)
    return payload


def dumpster_payload(**overrides):
    payload = {
        "title": "Roll-off 20 yard",
        "description": "Good for renovations",
        "location": "Downtown Austin",
        "latitude": 30.2672,
        "longitude": -97.7431,
        "address": "500 Congress Ave",
        "city": "Austin",
        "state": "TX",
        "zip_code": "78701",
        "price_per_day": 72.0,
        "size": "medium",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_user():
    """Create a user through the service layer."""
    def _make(email="alice@example.com", **overrides):
        data = user_payload(email=email, **overrides)
        data["date_of_birth"] = date.fromisoformat(data["date_of_birth"])
        return user_service.register(data)
    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def other_user(make_user):
    return make_user(email="bob@example.com", first_name="Bob")


@pytest.fixture
def make_dumpster(user):
    def _make(owner=None, **overrides):
        owner = owner or user
        return dumpster_service.create(owner.id, dumpster_payload(**overrides))
    return _make


@pytest.fixture
def dumpster(make_dumpster):
    return make_dumpster()


@pytest.fixture
def login(client):
    """Log a registered user in over HTTP and return the token payload."""
    def _login(email="alice@example.com", password=PASSWORD):
        resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["data"]
    return _login


@pytest.fixture
def auth_headers(user, login):
    tokens = login(user.email)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def other_headers(other_user, login):
    tokens = login(other_user.email)
    return {"Authorization": f"Bearer {tokens['access_token']}"}
