"""Shared fixtures and utilities for tests."""

import os

# Settings are read when core.config is first imported, so the test
# environment has to be in place before any application import below.
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-min-32-chars-long-for-security")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_interviews.db")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("JSON_LOGS", "false")
os.environ.setdefault("SEED_DEFAULT_USERS", "true")
os.environ.setdefault("SEED_REFERENCE_DATA", "true")

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from core.config import settings
from database.engine import AsyncSessionLocal, close_db, configure_engine, init_db


DEFAULT_CREDENTIALS = {
    "admin": ("admin", "admin_password"),
    "hr": ("hr_admin", "hr_password"),
    "technical_interviewer": ("tech_interviewer", "tech_password"),
    "director": ("director", "director_password"),
}

API = settings.api_v1_prefix


@pytest.fixture
def database_url(tmp_path):
    """A fresh SQLite file per test."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    configure_engine(url)
    return url


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest_asyncio.fixture
async def db(database_url):
    """Async session on an empty schema (no seed data)."""
    await init_db()
    async with AsyncSessionLocal() as session:
        yield session
    await close_db()


@pytest.fixture
def client(database_url):
    """TestClient with the lifespan run, so tables exist and defaults are seeded."""
    from api.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def _login(client: TestClient, username: str, password: str) -> dict:
    response = client.post(f"{API}/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def login(client):
    """Log in and return the Authorization header."""
    return lambda username, password: _login(client, username, password)


@pytest.fixture
def auth_headers(client):
    """Authorization headers for each seeded role, keyed by role value."""
    return {
        role: _login(client, username, password)
        for role, (username, password) in DEFAULT_CREDENTIALS.items()
    }


@pytest.fixture
def user_ids(client, auth_headers):
    """Ids of the seeded accounts, keyed by role value."""
    response = client.get(f"{API}/users", headers=auth_headers["admin"])
    return {user["role"]: user["id"] for user in response.json()}


@pytest.fixture
def interview_date() -> str:
    return datetime(2030, 1, 15, 10, 0, tzinfo=timezone.utc).isoformat()
