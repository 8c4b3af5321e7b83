"""
posts/models.py -- Domain dataclasses for posts.

These are pure data containers with zero logic. Ownership rules live in
posts/access.py; persistence lives in posts/store.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Post:
    """A published post.

    author_id is set once at creation and is never part of an update.
    id is None before the record is written to the database.
    """

    title: str
    content: str
    author_id: str
    image: Optional[str] = None
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""


@dataclass
class PostAuthor:
    """Public author fields shown alongside a post."""

    id: str
    username: str
    name: str


@dataclass
class PostView:
    """A post with its author resolved, as returned by the read surface.

    author is None only if the author record cannot be resolved.
    """

    post: Post
    author: Optional[PostAuthor]
