"""
Pytest configuration and fixtures.
"""
import os
import tempfile

# Settings are read at import time, so they have to be in place first.
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOGIN_DELAY_SECONDS"] = "0"
os.environ.setdefault("CAMPUS_DB_NAME", os.path.join(tempfile.mkdtemp(prefix="campus-tests-"), "import.sqlite3"))

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from schemas.auth import User
from services.content import ContentService
from services.session import SessionService
from storage import KeyValueStore

ADMIN_EMAIL = "admin@igdtuw.ac.in"
ADMIN_PASSWORD = "password123"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def store(tmp_path):
    return KeyValueStore(str(tmp_path / "campus.sqlite3"))


@pytest.fixture
def sessions(store):
    return SessionService(store, login_delay=0)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def content(store, clock):
    return ContentService(store, clock=clock)


@pytest.fixture
def student():
    return User(id="user_1", email="student@igdtuw.ac.in", name="Student")


@pytest.fixture
def admin():
    return User(id="user_2", email=ADMIN_EMAIL, name="Admin", is_admin=True)


@pytest.fixture
def client(tmp_path):
    app = create_app(db_name=str(tmp_path / "api.sqlite3"), login_delay=0)
    return TestClient(app)


@pytest.fixture
def api(client):
    """API client fixture - helper methods for authenticated calls."""
    class APIClient:
        def __init__(self, client):
            self.client = client

        def signup(self, email: str, name: str = "Student", password: str = "secret123") -> dict:
            r = self.client.post("/auth/signup", json={"email": email, "name": name, "password": password})
            assert r.status_code == 201, f"Signup failed: {r.text}"
            return r.json()

        def login(self, email: str, password: str) -> dict:
            r = self.client.post("/auth/login", json={"email": email, "password": password})
            assert r.status_code == 200, f"Login failed: {r.text}"
            return r.json()

        def headers(self, auth: dict) -> dict:
            return {"Authorization": f"Bearer {auth['accessToken']}"}

        def student_headers(self) -> dict:
            return self.headers(self.signup("student@igdtuw.ac.in"))

        def admin_headers(self) -> dict:
            return self.headers(self.login(ADMIN_EMAIL, ADMIN_PASSWORD))

        def create_post(self, headers: dict, **fields) -> dict:
            body = {"title": "Hello", "content": "First post", "tags": ["General"]}
            body.update(fields)
            r = self.client.post("/posts/", json=body, headers=headers)
            assert r.status_code == 201, f"Create post failed: {r.text}"
            return r.json()

    return APIClient(client)
