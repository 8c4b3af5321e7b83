"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as posts/store.py).
UserStore is the repository; _row_to_user / _row_to_public_user are the
mappers. Route and service code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  get_by_id() selects an explicit column list that omits hashed_password, so
  the hash never leaves this module through the identity-resolution path.

  UNIQUE(email) relies on SQL treating NULLs as distinct: any number of
  accounts may register without an email, but two accounts can never share
  one. Empty strings are normalized to NULL before insert for the same reason.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import PublicUser, User
from core.config import get_settings
from core.errors import DuplicateUserError, StoreError

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), unique=True),  # NULL when not provided
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_PUBLIC_COLUMNS = (
    _users.c.id,
    _users.c.username,
    _users.c.name,
    _users.c.email,
    _users.c.created_at,
    _users.c.updated_at,
)


# ---------------------------------------------------------------------------
# Engine helpers (shared with posts/store.py)
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    """Create an engine suitable for use from FastAPI's worker threads."""
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore()
        user_id = store.create_user(User(username="alice", name="Alice", hashed_password=hash_password("pw")))
        user = store.get_by_id(user_id)
        store.close()
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        _metadata.create_all(self.engine)

    @contextmanager
    def _connect(self, action: str) -> Iterator[Connection]:
        """Yield a connection; wrap any driver failure in StoreError.

        IntegrityError is passed through untouched so create_user() can tell a
        uniqueness violation apart from other failures.
        """
        try:
            with self.engine.connect() as conn:
                yield conn
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            raise StoreError(f"Error {action}.", detail=str(exc)) from exc

    # ------------------------------------------------------------------
    # User queries
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> str:
        """Insert a new user and return its assigned id.

        Raises DuplicateUserError if the username, or a non-empty email,
        already exists. The UNIQUE constraints make this safe under concurrent
        registration: exactly one insert wins.
        """
        user_id = new_id()
        stamp = now_iso()
        try:
            with self._connect("registering user") as conn:
                conn.execute(
                    _users.insert().values(
                        id=user_id,
                        username=user.username,
                        name=user.name,
                        email=user.email or None,
                        hashed_password=user.hashed_password,
                        created_at=stamp,
                        updated_at=stamp,
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateUserError(detail=str(exc.orig)) from exc
        return user_id

    def get_by_username(self, username: str) -> User | None:
        """Look up a full user record (hash included) by exact username.

        Internal to the auth service's login path. Returns None if not found.
        """
        with self._connect("looking up user") as conn:
            row = conn.execute(_users.select().where(_users.c.username == username)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: str) -> PublicUser | None:
        """Look up a user by id without the password hash. Returns None if not found."""
        with self._connect("looking up user") as conn:
            row = conn.execute(select(*_PUBLIC_COLUMNS).where(_users.c.id == user_id)).fetchone()
        return _row_to_public_user(row) if row is not None else None

    def get_authors(self, user_ids: Iterable[str]) -> dict[str, PublicUser]:
        """Resolve many ids in one query. Unknown ids are absent from the result."""
        ids = set(user_ids)
        if not ids:
            return {}
        with self._connect("resolving authors") as conn:
            rows = conn.execute(select(*_PUBLIC_COLUMNS).where(_users.c.id.in_(ids))).fetchall()
        return {row.id: _row_to_public_user(row) for row in rows}

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_public_user(row) -> PublicUser:
    return PublicUser(
        id=row.id,
        username=row.username,
        name=row.name,
        email=row.email,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
