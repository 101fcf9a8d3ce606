"""
tests/conftest.py -- Shared test fixtures for the Inventory API tests.

This module provides:
  - settings: explicit Settings with a fixed signing secret
  - _patch_lifespan(): wires stores backed by an in-memory MongoDB double
    (mongomock-motor) into app.state, bypassing the real Mongo connection;
    the raw database is kept on app.state.db for direct assertions
  - client: TestClient over a fresh app and a fresh empty database
  - register_user(): helper that registers through the API and returns the body
  - auth_headers: Authorization header for a freshly registered user

Each test gets its own app and database, so tests never see each other's
records. The shared slowapi limiter is disabled here; the rate limit test
re-enables it explicitly.
"""

from __future__ import annotations

import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from api.limiter import limiter
from api.main import create_app
from auth.store import UserStore
from core.config import Settings
from inventory.store import InventoryStore

TEST_SECRET = "test-signing-secret-0123456789abcdef"
DEFAULT_PASSWORD = "correct-horse-battery"


def _patch_lifespan():
    """Return an async context manager that replaces the real lifespan.

    A uniquely named database per app keeps tests isolated even though
    mongomock shares server state between clients in one process.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        db = AsyncMongoMockClient()[f"inventory_test_{uuid.uuid4().hex}"]
        app.state.db = db
        app.state.user_store = UserStore(db)
        await app.state.user_store.ensure_indexes()
        app.state.inventory = InventoryStore(db)
        yield

    return test_lifespan


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret=TEST_SECRET, debug=False)


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """TestClient over the real app with an isolated in-memory store."""
    limiter.enabled = False
    app = create_app(settings)
    app.router.lifespan_context = _patch_lifespan()
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


def register_user(client: TestClient, email: str = "ada@example.com", password: str = DEFAULT_PASSWORD) -> dict:
    resp = client.post(
        "/api/users/register",
        json={"name": "Lovelace", "firstName": "Ada", "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    token = register_user(client)["token"]
    return {"Authorization": f"Bearer {token}"}
