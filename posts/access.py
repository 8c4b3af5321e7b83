"""
posts/access.py -- Ownership rules for the post resource.

Lifecycle of a post: absent -> created -> updated (any number of times) ->
deleted. Deleted is terminal: the row is removed and the id resolves to
NotFoundError afterwards.

Gate order for update and delete is fixed:
  1. existence  -- NotFoundError, whoever the caller is
  2. ownership  -- ForbiddenError when the caller is not the author
  3. payload    -- ValidationError for fields outside MERGEABLE_FIELDS

A missing post therefore never answers Forbidden, so unrelated callers
cannot probe which ids exist through the permission error.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from auth.models import SessionClaims
from core.errors import ForbiddenError, NotFoundError, StoreError, ValidationError
from posts.models import Post, PostView
from posts.store import PostStore

logger = logging.getLogger("postboard.posts")

# Fields a caller may change. author_id, id and timestamps are never mergeable.
MERGEABLE_FIELDS = frozenset({"title", "image", "content"})
# Mergeable fields that must stay non-empty.
_REQUIRED_FIELDS = frozenset({"title", "content"})


class PostAccessController:
    """Applies ownership checks before delegating to PostStore."""

    def __init__(self, store: PostStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # Public reads
    # ------------------------------------------------------------------

    def list_posts(self) -> list[PostView]:
        return self.store.list_posts()

    def get(self, post_id: str) -> PostView:
        post = self._require_post(post_id)
        return self.store.resolve_authors([post])[0]

    # ------------------------------------------------------------------
    # Authenticated writes
    # ------------------------------------------------------------------

    def create(self, identity: SessionClaims, title: str, content: str, image: Optional[str] = None) -> PostView:
        """Create a post authored by the caller."""
        _require_text("title", title)
        _require_text("content", content)
        post = Post(title=title, content=content, image=image or None, author_id=identity.user_id)
        post_id = self.store.create_post(post)
        created = self.store.get_post(post_id)
        if created is None:
            raise StoreError("Post not found after write.")
        logger.info("User %s created post %s", identity.user_id, post_id)
        return self.store.resolve_authors([created])[0]

    def update(self, identity: SessionClaims, post_id: str, fields: dict[str, Any]) -> PostView:
        """Merge allowed fields into a post the caller owns."""
        self._require_owned(identity, post_id, "update")

        rejected = set(fields) - MERGEABLE_FIELDS
        if rejected:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(rejected))}.")
        if not fields:
            raise ValidationError("No fields to update.")
        for name in _REQUIRED_FIELDS & set(fields):
            _require_text(name, fields[name])
        if "image" in fields and not fields["image"]:
            fields = {**fields, "image": None}

        if not self.store.update_post(post_id, **fields):
            # Deleted between the ownership check and the write.
            raise NotFoundError("Post not found.")
        updated = self.store.get_post(post_id)
        if updated is None:
            raise NotFoundError("Post not found.")
        logger.info("User %s updated post %s (%s)", identity.user_id, post_id, ", ".join(sorted(fields)))
        return self.store.resolve_authors([updated])[0]

    def delete(self, identity: SessionClaims, post_id: str) -> None:
        """Delete a post the caller owns."""
        self._require_owned(identity, post_id, "delete")
        if not self.store.delete_post(post_id):
            raise NotFoundError("Post not found.")
        logger.info("User %s deleted post %s", identity.user_id, post_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_post(self, post_id: str) -> Post:
        post = self.store.get_post(post_id)
        if post is None:
            raise NotFoundError("Post not found.")
        return post

    def _require_owned(self, identity: SessionClaims, post_id: str, action: str) -> Post:
        post = self._require_post(post_id)
        if post.author_id != identity.user_id:
            logger.warning("User %s denied %s on post %s", identity.user_id, action, post_id)
            raise ForbiddenError(f"Not authorised to {action} the post.")
        return post


def _require_text(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required.")
