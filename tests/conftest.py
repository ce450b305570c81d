"""Pytest configuration and fixtures."""

import os

# Settings are read at import time
os.environ["STORE_BACKEND"] = "memory"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "development"

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.security import PasswordHasher, TokenService  # noqa: E402
from app.database.memory_store import InMemoryStore  # noqa: E402
from app.database.store import StoreError  # noqa: E402
from app.database.supabase_client import get_store  # noqa: E402
from app.main import app  # noqa: E402
from app.modules.auth.service import AuthService  # noqa: E402

WRITE_OPERATIONS = {"insert_one", "update_by_field", "delete_by_field"}


class FlakyStore(InMemoryStore):
    """InMemoryStore that records calls and fails chosen (operation, table) pairs."""

    def __init__(self):
        super().__init__()
        self.failures = set()
        self.calls = []

    def fail(self, operation: str, table: str):
        self.failures.add((operation, table))

    def writes(self, table=None):
        return [
            (op, t) for op, t in self.calls
            if op in WRITE_OPERATIONS and (table is None or t == table)
        ]

    def _record(self, operation: str, table: str):
        self.calls.append((operation, table))
        if (operation, table) in self.failures:
            raise StoreError(f"{operation} on {table} failed")

    def find_one(self, table, field, value, columns="*"):
        self._record("find_one", table)
        return super().find_one(table, field, value, columns)

    def insert_one(self, table, record):
        self._record("insert_one", table)
        return super().insert_one(table, record)

    def update_by_field(self, table, field, value, changes):
        self._record("update_by_field", table)
        return super().update_by_field(table, field, value, changes)

    def delete_by_field(self, table, field, value):
        self._record("delete_by_field", table)
        return super().delete_by_field(table, field, value)


class FrozenClock:
    def __init__(self, now=None):
        self.now = now or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def tokens(clock):
    return TokenService("test-secret", clock=clock)


@pytest.fixture
def service(store, hasher, tokens):
    return AuthService(store, hasher, tokens)


@pytest.fixture
def client(store):
    """Create a test client backed by the in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def signup_user(client):
    """Register a user through the API and return the response body."""

    def _signup(email="test@example.com", password="testpass123", name="Test User", **extra):
        response = client.post(
            "/api/auth/signup",
            json={"email": email, "password": password, "name": name, **extra},
        )
        assert response.status_code == 201
        return response.json()

    return _signup


@pytest.fixture
def auth_headers(signup_user):
    body = signup_user()
    return {"Authorization": f"Bearer {body['token']}"}
