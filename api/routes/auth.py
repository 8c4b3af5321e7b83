"""
api/routes/auth.py -- Account and session REST endpoints.

Routes:
  POST /auth/register  -- create an account; 201
  POST /auth/login     -- password login; sets the session cookie
  GET  /auth/me        -- current user without password hash (requires auth)
  POST /auth/logout    -- clears the session cookie; always 200

Handlers are plain `def` so bcrypt work runs in FastAPI's thread pool rather
than on the event loop. Domain failures propagate as core.errors exceptions;
api/main.py maps them to status codes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import LoginRequest, LoginResponse, MessageResponse, RegisterRequest, RegisterResponse, UserResponse
from auth import service
from auth.dependencies import get_session
from auth.models import SessionClaims
from auth.store import UserStore
from auth.tokens import clear_auth_cookie, set_auth_cookie
from core.config import get_settings
from core.errors import UserNotFoundError

# Auth policy:
# - POST /auth/register: public
# - POST /auth/login:    public
# - POST /auth/logout:   public -- clearing a cookie needs no prior auth
# - GET  /auth/me:       requires a session (get_session)
router = APIRouter()


@router.post("/auth/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> RegisterResponse:
    """Register a new account. Username and (when given) email must be unique."""
    user_store: UserStore = request.app.state.user_store
    user = service.register(
        user_store,
        username=body.username,
        name=body.name,
        password=body.password,
        email=body.email,
    )
    return RegisterResponse(message="User registered successfully", user=UserResponse.from_user(user))


@router.post("/auth/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with username and password; set the session cookie.

    Unknown username -> 404, wrong password -> 401 (raised by the service).
    """
    user_store: UserStore = request.app.state.user_store
    _, token = service.login(user_store, body.username, body.password)

    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            message="Logged in successfully",
            access_token=token,
            expires_in=get_settings().token_expire_seconds,
        ).model_dump(),
    )
    set_auth_cookie(resp, token)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/auth/me", response_model=UserResponse)
def me(request: Request, session: SessionClaims = Depends(get_session)) -> UserResponse:
    """Return the current user's record without the password hash."""
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(session.user_id)
    if user is None:
        raise UserNotFoundError()
    return UserResponse.from_user(user)


@router.post("/auth/logout", response_model=MessageResponse)
async def logout() -> JSONResponse:
    """Clear the session cookie. Tokens are stateless; nothing changes server-side."""
    resp = JSONResponse(content=MessageResponse(message="Logged out successfully").model_dump())
    clear_auth_cookie(resp)
    return resp
