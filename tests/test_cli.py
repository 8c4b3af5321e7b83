"""
tests/test_cli.py -- Tests for the main.py command-line entry point.

Covers:
  - create-user registers an account in the configured database
  - a duplicate username exits non-zero with the service's message
  - serve hands the app import path and port to uvicorn
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import uvicorn

import main
from auth.store import UserStore
from core.config import Settings


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    settings = Settings(_env_file=None, debug=True, secret_key="k" * 32, database_url=url)
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    return url


def test_create_user(db_url, capsys):
    rc = main.main(["create-user", "alice", "--name", "Alice", "--password", "pw1"])
    assert rc == 0
    assert "Created user alice" in capsys.readouterr().out

    store = UserStore(db_url)
    try:
        assert store.get_by_username("alice").name == "Alice"
    finally:
        store.close()


def test_create_user_duplicate(db_url, capsys):
    assert main.main(["create-user", "alice", "--password", "pw1"]) == 0
    assert main.main(["create-user", "alice", "--password", "pw1"]) == 1
    assert "already exists" in capsys.readouterr().out


def test_serve_runs_uvicorn(db_url, monkeypatch):
    run = MagicMock()
    monkeypatch.setattr(uvicorn, "run", run)
    assert main.main(["serve", "--port", "8123"]) == 0
    run.assert_called_once_with("api.main:app", host="127.0.0.1", port=8123, reload=False)
