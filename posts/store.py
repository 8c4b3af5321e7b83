"""
posts/store.py -- SQLAlchemy Core persistence layer for posts.

Pattern: Repository + Data Mapper (same as auth/store.py).
PostStore is the repository; _row_to_post is the mapper.

This store knows nothing about ownership. It persists whatever the access
controller hands it; posts/access.py decides who may write.

Author resolution goes through UserStore.get_authors() rather than a SQL
join, so the two stores may live in different databases. The projection it
returns has no password hash column, so none can leak into a listing.

Every write is a single statement: concurrent updates to the same post are
last-write-wins per column.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from auth.store import UserStore, make_engine, new_id, now_iso
from core.config import get_settings
from core.errors import StoreError
from posts.models import Post, PostAuthor, PostView

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_posts = Table(
    "posts",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("title", Text, nullable=False),
    Column("image", Text),
    Column("content", Text, nullable=False),
    Column("author_id", String(32), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

# Columns update_post() will write. id and author_id are never written after insert.
_WRITABLE_COLUMNS = frozenset({"title", "image", "content"})


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class PostStore:
    """Repository for Post entities.

    Usage:
        store = PostStore(user_store=user_store)
        post_id = store.create_post(Post(title="T", content="C", author_id=user_id))
        views = store.list_posts()
        store.close()
    """

    def __init__(self, db_url: Optional[str] = None, *, user_store: UserStore) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        self.user_store = user_store
        _metadata.create_all(self.engine)

    @contextmanager
    def _connect(self, action: str) -> Iterator[Connection]:
        try:
            with self.engine.connect() as conn:
                yield conn
        except SQLAlchemyError as exc:
            raise StoreError(f"Error {action}.", detail=str(exc)) from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_post(self, post: Post) -> str:
        """Insert a new post and return its assigned id."""
        post_id = new_id()
        stamp = now_iso()
        with self._connect("creating post") as conn:
            conn.execute(
                _posts.insert().values(
                    id=post_id,
                    title=post.title,
                    image=post.image,
                    content=post.content,
                    author_id=post.author_id,
                    created_at=stamp,
                    updated_at=stamp,
                )
            )
            conn.commit()
        return post_id

    def update_post(self, post_id: str, **fields) -> bool:
        """Write the given fields and advance updated_at.

        Accepted fields: title, image, content. Anything else raises
        ValueError -- the store never rewrites id or author_id.

        Returns True if a row was updated, False if post_id was not found.
        """
        unknown = set(fields) - _WRITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown post fields: {sorted(unknown)!r}")
        with self._connect("updating post") as conn:
            result = conn.execute(
                _posts.update().where(_posts.c.id == post_id).values(**fields, updated_at=now_iso())
            )
            conn.commit()
        return result.rowcount > 0

    def delete_post(self, post_id: str) -> bool:
        """Permanently delete a post. Returns True if deleted, False if not found."""
        with self._connect("deleting post") as conn:
            result = conn.execute(_posts.delete().where(_posts.c.id == post_id))
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_post(self, post_id: str) -> Optional[Post]:
        """Look up a post by id. Returns None if not found."""
        with self._connect("getting post") as conn:
            row = conn.execute(_posts.select().where(_posts.c.id == post_id)).fetchone()
        return _row_to_post(row) if row is not None else None

    def list_posts(self) -> list[PostView]:
        """Return every post, newest first, with authors resolved."""
        with self._connect("getting posts") as conn:
            rows = conn.execute(_posts.select().order_by(_posts.c.created_at.desc(), _posts.c.id)).fetchall()
        return self.resolve_authors([_row_to_post(r) for r in rows])

    def resolve_authors(self, posts: list[Post]) -> list[PostView]:
        """Attach {id, username, name} for each post's author in one lookup."""
        authors = self.user_store.get_authors(p.author_id for p in posts)
        views = []
        for p in posts:
            user = authors.get(p.author_id)
            author = PostAuthor(id=user.id, username=user.username, name=user.name) if user else None
            views.append(PostView(post=p, author=author))
        return views

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_post(row) -> Post:
    return Post(
        id=row.id,
        title=row.title,
        image=row.image,
        content=row.content,
        author_id=row.author_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
