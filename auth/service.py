"""
auth/service.py -- Registration, login and session resolution.

Composes the password hasher, the credential store and the token codec.
Functions take the store as an argument (the route layer pulls it from
app.state) so tests can drive them against an in-memory store directly.

Failure signalling:
  register()        -> ValidationError, DuplicateUserError
  login()           -> UserNotFoundError, InvalidCredentialsError
  resolve_session() -> UnauthenticatedError

Logout has no server-side counterpart: tokens are stateless, so the HTTP
layer just clears the cookie.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from auth.models import PublicUser, SessionClaims, User
from auth.passwords import DUMMY_HASH, MAX_PASSWORD_BYTES, hash_password, password_too_long, verify_password
from auth.tokens import issue_token, validate_token
from core.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    StoreError,
    UnauthenticatedError,
    UserNotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from auth.store import UserStore

logger = logging.getLogger("postboard.auth")


def register(
    store: UserStore,
    username: str,
    name: str,
    password: str,
    email: str | None = None,
) -> PublicUser:
    """Create an account and return it without the password hash.

    The up-front username check gives the common case a clear error without
    paying for bcrypt. Two concurrent registrations can both pass it; the
    store's UNIQUE constraint then rejects the loser with DuplicateUserError.
    """
    if password_too_long(password):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")

    if store.get_by_username(username) is not None:
        logger.info("Registration rejected: username %r already exists", username)
        raise DuplicateUserError("Username already exists.")

    user = User(
        username=username,
        name=name,
        email=email or None,
        hashed_password=hash_password(password),
    )
    try:
        user_id = store.create_user(user)
    except DuplicateUserError:
        logger.info("Registration rejected: username %r or its email already exists", username)
        raise

    created = store.get_by_id(user_id)
    if created is None:
        raise StoreError("User not found after write.")
    logger.info("Registered user %r (%s)", created.username, created.id)
    return created


def login(store: UserStore, username: str, password: str) -> tuple[PublicUser, str]:
    """Verify credentials and return (user, session token).

    bcrypt runs on both failure branches: against DUMMY_HASH for an unknown
    username and against the stored hash for a wrong password.
    """
    user = store.get_by_username(username)
    if user is None:
        verify_password(password, DUMMY_HASH)
        logger.info("Login failed: unknown username %r", username)
        raise UserNotFoundError()

    if not verify_password(password, user.hashed_password):
        logger.info("Login failed: bad password for %r", username)
        raise InvalidCredentialsError()

    token = issue_token(user.id, user.username)
    logger.info("Login succeeded for %r", username)
    public = PublicUser(
        id=user.id,
        username=user.username,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
    return public, token


def resolve_session(token: str | None) -> SessionClaims:
    """Return the claims of a valid token or raise UnauthenticatedError."""
    if not token:
        raise UnauthenticatedError("Access denied. No token provided.")
    try:
        return validate_token(token)
    except InvalidTokenError as exc:
        raise UnauthenticatedError("Invalid token.") from exc
