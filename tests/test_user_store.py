"""Unit tests for auth/store.py -- the credential store.

Covers:
- create_user() assigns an opaque id and get_by_id() returns it without the hash
- username uniqueness is absolute
- email uniqueness applies only when an email is present
- get_authors() resolves many ids at once and skips unknown ones
"""

from dataclasses import fields

import pytest

from auth.models import PublicUser, User
from auth.store import UserStore
from core.errors import DuplicateUserError, StoreError


def _user(username: str, email: str | None = None) -> User:
    return User(username=username, name=username.title(), email=email, hashed_password="$2b$12$fakehash")


def test_create_and_get_by_id_excludes_hash(user_store):
    user_id = user_store.create_user(_user("alice", "a@x.com"))
    assert isinstance(user_id, str) and len(user_id) == 32

    found = user_store.get_by_id(user_id)
    assert isinstance(found, PublicUser)
    assert found.username == "alice"
    assert found.name == "Alice"
    assert found.email == "a@x.com"
    assert "hashed_password" not in {f.name for f in fields(found)}


def test_get_by_username_returns_full_record(user_store):
    user_store.create_user(_user("alice"))
    found = user_store.get_by_username("alice")
    assert found is not None
    assert found.hashed_password == "$2b$12$fakehash"


def test_lookups_for_unknown_user_return_none(user_store):
    assert user_store.get_by_username("nobody") is None
    assert user_store.get_by_id("0" * 32) is None


def test_duplicate_username_rejected(user_store):
    user_store.create_user(_user("alice"))
    with pytest.raises(DuplicateUserError):
        user_store.create_user(_user("alice"))


def test_duplicate_email_rejected(user_store):
    user_store.create_user(_user("alice", "shared@x.com"))
    with pytest.raises(DuplicateUserError):
        user_store.create_user(_user("bob", "shared@x.com"))


def test_absent_emails_do_not_collide(user_store):
    user_store.create_user(_user("alice"))
    user_store.create_user(_user("bob"))
    user_store.create_user(_user("carol", ""))
    assert user_store.get_by_username("carol").email is None


def test_get_authors_batch(user_store):
    a = user_store.create_user(_user("alice"))
    b = user_store.create_user(_user("bob"))
    authors = user_store.get_authors([a, b, "f" * 32])
    assert set(authors) == {a, b}
    assert authors[b].username == "bob"
    assert user_store.get_authors([]) == {}


def test_driver_failure_wrapped_as_store_error():
    store = UserStore("sqlite:///:memory:")
    with store.engine.connect() as conn:
        conn.exec_driver_sql("DROP TABLE users")
        conn.commit()
    with pytest.raises(StoreError):
        store.get_by_username("alice")
    store.close()
