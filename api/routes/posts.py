"""
api/routes/posts.py -- Post REST endpoints.

Routes:
  POST   /posts       -- create a post authored by the caller (requires auth)
  GET    /posts       -- list every post with author {id, username, name} (public)
  GET    /posts/{id}  -- one post (public)
  PUT    /posts/{id}  -- merge title/image/content (requires auth, author only)
  DELETE /posts/{id}  -- delete (requires auth, author only)

Ownership is never checked here. Every write goes through
PostAccessController, which reports NotFound before Forbidden.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from api.models import MessageResponse, PostCreate, PostEnvelope, PostListResponse, PostResponse, PostUpdate
from auth.dependencies import get_session
from auth.models import SessionClaims
from posts.access import PostAccessController

router = APIRouter()


def _controller(request: Request) -> PostAccessController:
    return request.app.state.post_access


@router.post("/posts", response_model=PostEnvelope, status_code=201)
def create_post(
    body: PostCreate,
    session: SessionClaims = Depends(get_session),
    access: PostAccessController = Depends(_controller),
) -> PostEnvelope:
    view = access.create(session, title=body.title, content=body.content, image=body.image)
    return PostEnvelope(message="Posted", post=PostResponse.from_view(view))


@router.get("/posts", response_model=PostListResponse)
def list_posts(access: PostAccessController = Depends(_controller)) -> PostListResponse:
    """Public listing. Authors carry username and name only."""
    return PostListResponse(posts=[PostResponse.from_view(v) for v in access.list_posts()])


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(post_id: str, access: PostAccessController = Depends(_controller)) -> PostResponse:
    return PostResponse.from_view(access.get(post_id))


@router.put("/posts/{post_id}", response_model=PostEnvelope)
def update_post(
    post_id: str,
    body: PostUpdate,
    session: SessionClaims = Depends(get_session),
    access: PostAccessController = Depends(_controller),
) -> PostEnvelope:
    """Merge the supplied fields. Only keys present in the body are applied."""
    fields = body.model_dump(exclude_unset=True)
    fields.update(body.model_extra or {})
    view = access.update(session, post_id, fields)
    return PostEnvelope(message="Post updated successfully", post=PostResponse.from_view(view))


@router.delete("/posts/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str,
    session: SessionClaims = Depends(get_session),
    access: PostAccessController = Depends(_controller),
) -> MessageResponse:
    access.delete(session, post_id)
    return MessageResponse(message="Post deleted successfully")
