"""
API request and response models for Postboard REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
posts/models.py, which own the internal domain representation. Route handlers
map between the two.

Validation here is presence only: required strings must be non-empty after
whitespace stripping. No content sanitization is applied.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import PublicUser
from auth.passwords import MAX_PASSWORD_BYTES, password_too_long
from posts.models import PostView

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


def _check_password_bytes(value: str) -> str:
    if password_too_long(value):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    return value


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: str) -> str:
        """bcrypt counts bytes, not characters; accented passwords hit the cap sooner."""
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: str) -> str:
        return _check_password_bytes(value)


class PostCreate(BaseModel):
    """Request body for POST /posts."""

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    image: Optional[str] = None


class PostUpdate(BaseModel):
    """Request body for PUT /posts/{id}.

    Unknown keys are kept (extra="allow") and forwarded to the access
    controller, which rejects anything outside its mergeable allow-list.
    """

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """A user record. There is no password field to leak."""

    id: str
    username: str
    name: str
    email: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_user(cls, user: PublicUser) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            name=user.name,
            email=user.email,
            created_at=user.created_at or "",
            updated_at=user.updated_at or "",
        )


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class MessageResponse(BaseModel):
    message: str


class AuthorResponse(BaseModel):
    id: str
    username: str
    name: str


class PostResponse(BaseModel):
    """A post with its author resolved to {id, username, name}."""

    id: str
    title: str
    image: Optional[str] = None
    content: str
    author_id: str
    author: Optional[AuthorResponse] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_view(cls, view: PostView) -> "PostResponse":
        """Factory colocated with the output model rather than spread across routes."""
        post = view.post
        author = None
        if view.author is not None:
            author = AuthorResponse(id=view.author.id, username=view.author.username, name=view.author.name)
        return cls(
            id=post.id,
            title=post.title,
            image=post.image,
            content=post.content,
            author_id=post.author_id,
            author=author,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostEnvelope(BaseModel):
    message: str
    post: PostResponse


class PostListResponse(BaseModel):
    posts: list[PostResponse]


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Uniform error body: {"error": {"code", "message", "detail"}}."""

    error: ErrorDetail
