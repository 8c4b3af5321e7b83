"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Two token sources are checked in priority order:
  1. Cookie ("access_token") -- set by POST /auth/login for browser clients.
  2. Authorization: Bearer <token> header -- for non-browser API clients.

get_session() is the precondition gate for every identity-requiring route.
It raises UnauthenticatedError (401 at the boundary) when no valid token is
present. It never touches the database: the claims alone identify the caller.

Layer rule: no imports from api/ or posts/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import SessionClaims
from auth.service import resolve_session
from auth.tokens import COOKIE_NAME


def _extract_token(request: Request) -> str | None:
    token: str | None = request.cookies.get(COOKIE_NAME)
    if not token:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[7:].strip()
    return token or None


def get_session(request: Request) -> SessionClaims:
    """Require a valid session token.

    Use as a FastAPI dependency:
        @router.post("/posts")
        def route(session: SessionClaims = Depends(get_session)): ...
    """
    return resolve_session(_extract_token(request))
