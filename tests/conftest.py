"""
Shared fixtures for the API test suite.

Each test gets its own SQLite database file under tmp_path, created by the
application lifespan, and the AI service is disabled unless a test swaps in
its own client through dependency overrides.
"""
import pytest
from fastapi.testclient import TestClient

from config.aiconfig import ai_settings
from config.appconfig import settings


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "dentassist_test.db"


@pytest.fixture
def app(db_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setattr(settings, "AUTO_CREATE_TABLES", True)
    monkeypatch.setattr(ai_settings, "AI_SERVICE_ENABLED", False)

    from app.main import app as fastapi_app

    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Register a user, log in and return the bearer header."""
    client.post(
        "/api/auth/register",
        json={"email": "dentist@clinic.com", "password": "s3cret-pass", "name": "Dr. Molar"},
    )
    response = client.post(
        "/api/auth/login",
        json={"email": "dentist@clinic.com", "password": "s3cret-pass"},
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_patient(client, auth_headers):
    """Factory creating a patient through the API and returning its JSON."""

    def _make(**fields):
        body = {"name": "Jane Doe", **fields}
        response = client.post("/api/patients", json=body, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make
