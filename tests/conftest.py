"""
tests/conftest.py -- Shared test fixtures for authflow integration tests.

This module provides:
  - _make_test_store(): creates an isolated in-memory DB for the user store
  - _make_test_service(): AuthService with a fixed test key and cheap bcrypt
  - _patch_lifespan(): wires the test store and service into app.state
  - api_client: TestClient running the real app against the test store

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because AuthService runs store calls in a thread pool. Plain :memory: DBs
are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

The DEBUG env var must be set before api.main is imported so get_settings()
auto-generates a signing key instead of raising ValueError.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate JWT_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AuthService
from auth.store import UserStore

TEST_SECRET = "test-signing-key-0123456789abcdef0123456789abcdef"

# bcrypt's minimum cost. Keeps the suite fast; production default is 10.
TEST_BCRYPT_ROUNDS = 4


@dataclass
class ApiHarness:
    client: TestClient
    store: UserStore
    service: AuthService


# ---------------------------------------------------------------------------
# Store / service helpers
# ---------------------------------------------------------------------------


def _make_test_store(db_suffix: str) -> UserStore:
    """Create an isolated named shared-memory SQLite store.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state (e.g. 'routes', 'health').
    """
    return UserStore(db_url=f"sqlite:///file:test_auth_{db_suffix}?mode=memory&cache=shared&uri=true")


def _make_test_service(store: UserStore) -> AuthService:
    return AuthService(store, secret_key=TEST_SECRET, token_expire_seconds=3600, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


def _patch_lifespan(store: UserStore, service: AuthService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = store
        app.state.auth_service = service
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    """A fresh, uniquely named store per test."""
    s = _make_test_store(f"unit_{uuid.uuid4().hex}")
    yield s
    s.close()


@pytest.fixture
def service(store: UserStore) -> AuthService:
    return _make_test_service(store)


@pytest.fixture(scope="module")
def api_client(request) -> Generator[ApiHarness, None, None]:
    """Yield an ApiHarness for API integration tests.

    One TestClient per test module for speed. The module name is used as
    the DB suffix, so usernames only need to be unique within a module.
    """
    store = _make_test_store(request.module.__name__.rsplit(".", 1)[-1])
    service = _make_test_service(store)

    app.router.lifespan_context = _patch_lifespan(store, service)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiHarness(client=client, store=store, service=service)

    store.close()
