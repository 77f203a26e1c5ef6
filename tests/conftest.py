"""
tests/conftest.py -- Shared test fixtures for postgate.

This module provides:
  - settings: a Settings instance with a fixed test secret
  - user_store / post_store: isolated in-memory SQLite stores per test
  - directory / content: services wired to those stores
  - api_client: TestClient over the real app with a patched lifespan
  - register_user: helper fixture that returns (user_id, token) via HTTP

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares one
in-memory instance across all connections in the same process.

JWT_SECRET must be set before any app import so get_settings() succeeds.
"""

from __future__ import annotations

import asyncio
import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager, suppress

# CRITICAL: Set JWT_SECRET before any core/auth/api import.
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-at-least-32-characters")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.directory import UserDirectory
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import Settings
from posts.service import ContentStore
from posts.store import PostStore

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters"


def _memory_url(prefix: str) -> str:
    """Return a unique named shared-memory SQLite URL."""
    return f"sqlite:///file:{prefix}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


# ---------------------------------------------------------------------------
# Service-level fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, jwt_secret=TEST_SECRET)


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    """UserStore with the unique email index already in place."""
    store = UserStore(_memory_url("users"))
    store.ensure_email_index()
    yield store
    store.close()


@pytest.fixture
def post_store() -> Generator[PostStore, None, None]:
    store = PostStore(_memory_url("posts"))
    yield store
    store.close()


@pytest.fixture
def directory(user_store: UserStore, tokens: TokenService) -> UserDirectory:
    return UserDirectory(user_store, tokens)


@pytest.fixture
def content(post_store: PostStore) -> ContentStore:
    return ContentStore(post_store)


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(settings: Settings, user_store: UserStore, post_store: PostStore):
    """Return an async context manager that replaces the real lifespan.

    Wires the test stores into app.state so routes hit isolated in-memory
    databases. The index task is a real asyncio.Task so the
    shutdown path (cancel, then await) behaves as in production.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.token_service = TokenService(settings)
        app.state.user_store = user_store
        app.state.post_store = post_store
        app.state.directory = UserDirectory(user_store, app.state.token_service)
        app.state.content = ContentStore(post_store)
        app.state.index_task = asyncio.create_task(asyncio.sleep(0))
        yield
        app.state.index_task.cancel()
        with suppress(asyncio.CancelledError):
            await app.state.index_task

    return test_lifespan


@pytest.fixture
def api_client(settings: Settings, user_store: UserStore, post_store: PostStore) -> Generator[TestClient, None, None]:
    """Yield a TestClient over the real app backed by fresh in-memory stores."""
    app.router.lifespan_context = _patch_lifespan(settings, user_store, post_store)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def register_user(api_client: TestClient):
    """Return a helper that registers a user over HTTP and logs in.

    The helper returns (user_id, token).
    """

    def _register(username: str, email: str, password: str = "pw") -> tuple[str, str]:
        resp = api_client.post(
            "/register",
            json={"username": username, "email": email, "password": password, "phonenumber": "555"},
        )
        assert resp.status_code == 200, resp.text
        user_id = resp.json()["id"]
        resp = api_client.post("/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return user_id, resp.json()

    return _register
