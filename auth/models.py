"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and services do
the work; these only own the shape.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered account, including its password hash.

    Only the credential store and the auth service see this type. Every read
    path that leaves the auth package uses PublicUser instead.

    email is None when the account registered without one; several accounts
    may share the absent value.
    """

    username: str
    name: str
    hashed_password: str
    email: str | None = None
    id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class PublicUser:
    """Projection of a User without the password hash."""

    id: str
    username: str
    name: str
    email: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class SessionClaims:
    """Decoded payload of a valid session token. Never persisted."""

    user_id: str
    username: str
    issued_at: datetime
    expires_at: datetime
