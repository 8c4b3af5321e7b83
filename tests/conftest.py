"""
tests/conftest.py -- Shared test fixtures for Postboard.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + posts
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient bound to the real app with isolated stores
  - register_and_login: helper fixture returning a session token for a new user
  - user_store / post_store / access: unit-test fixtures on plain :memory: DBs

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the TestClient fixtures because route handlers run in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread. Unit-test fixtures stay on one thread, so :memory: is fine.

The DEBUG env var must be set before any auth/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any auth/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import UserStore
from posts.access import PostAccessController
from posts.store import PostStore

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, PostStore]:
    """Create isolated named shared-memory SQLite stores for test isolation.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    url = f"sqlite:///file:test_postboard_{db_suffix}?mode=memory&cache=shared&uri=true"
    user_store = UserStore(db_url=url)
    post_store = PostStore(db_url=url, user_store=user_store)
    return user_store, post_store


def _patch_lifespan(user_store: UserStore, post_store: PostStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.post_store = post_store
        app.state.post_access = PostAccessController(post_store)
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Module-scoped API fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[TestClient, None, None]:
    """Yield a TestClient running the real app against isolated stores.

    Each test module gets its own database, named after the module.
    """
    user_store, post_store = _make_test_stores(request.module.__name__.rsplit(".", 1)[-1])
    app.router.lifespan_context = _patch_lifespan(user_store, post_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    post_store.close()
    user_store.close()


@pytest.fixture
def register_and_login(api_client: TestClient) -> Callable[..., tuple[str, str]]:
    """Return a helper that registers a fresh user and logs in.

    The helper returns (token, username). Usernames get a random suffix so
    tests sharing a module-scoped database never collide. The client's
    cookie jar is cleared afterwards so each request authenticates only with
    the Bearer header the test passes explicitly.
    """

    def _register_and_login(prefix: str = "user", name: str | None = None, password: str = "pw-secret-1"):
        username = f"{prefix}_{uuid.uuid4().hex[:8]}"
        resp = api_client.post(
            "/auth/register",
            json={"username": username, "name": name or prefix.title(), "password": password},
        )
        assert resp.status_code == 201, resp.text
        resp = api_client.post("/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        api_client.cookies.clear()
        return resp.json()["access_token"], username

    return _register_and_login


# ---------------------------------------------------------------------------
# Unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def post_store(user_store: UserStore) -> Generator[PostStore, None, None]:
    store = PostStore("sqlite:///:memory:", user_store=user_store)
    yield store
    store.close()


@pytest.fixture
def access(post_store: PostStore) -> PostAccessController:
    return PostAccessController(post_store)
