"""
auth/tokens.py -- Session token codec and cookie helpers.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry the
       user id (sub), username, issue time and expiry. The token is
       self-contained: there is no server-side session table, so a token stays
       valid until it expires. Logout only discards the client's copy.

  validate_token() raises InvalidTokenError on any failure -- bad signature,
       malformed payload, expired. The auth service turns that into
       UnauthenticatedError, which the API boundary reports as 401.

  SECRET_KEY: sourced from core.config.get_settings() once at import. It is
       never reassigned afterwards.

Layer rule: no imports from api/ or posts/. Import from core/ is allowed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from auth.models import SessionClaims
from core.config import get_settings
from core.errors import InvalidTokenError

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_SECRET_KEY: str = _settings.secret_key
_ALGORITHM = "HS256"

COOKIE_NAME = "access_token"


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def issue_token(user_id: str, username: str, ttl_seconds: int | None = None) -> str:
    """Encode a signed JWT with user identity and expiry.

    Args:
        user_id:     Opaque user identifier, stored as the subject claim.
        username:    Username at login time.
        ttl_seconds: Token lifetime. None uses Settings.token_expire_seconds.
    """
    duration = _settings.token_expire_seconds if ttl_seconds is None else ttl_seconds
    issued = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "username": username,
        "iat": issued,
        "exp": issued + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _SECRET_KEY, algorithm=_ALGORITHM)


def validate_token(token: str) -> SessionClaims:
    """Verify a JWT and return its claims.

    Raises InvalidTokenError if the signature does not match, the payload is
    missing a required claim, or the token has expired.
    """
    try:
        payload = jwt.decode(token, _SECRET_KEY, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError(detail=str(exc)) from exc

    user_id = payload.get("sub")
    username = payload.get("username")
    exp = payload.get("exp")
    iat = payload.get("iat", exp)
    if not isinstance(user_id, str) or not user_id or not isinstance(username, str):
        raise InvalidTokenError(detail="Token payload is missing identity claims.")
    if not isinstance(exp, (int, float)) or not isinstance(iat, (int, float)):
        raise InvalidTokenError(detail="Token payload is missing expiry claims.")

    return SessionClaims(
        user_id=user_id,
        username=username,
        issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_auth_cookie(response, token: str) -> None:
    """Write the session token as an httpOnly cookie on the response.

    httponly=True: JS cannot read the cookie.
    samesite="none" + secure: the frontend is served from another origin, so
        the cookie must be sent on cross-site requests. Browsers only accept
        sameSite=none together with Secure.
    max_age: Settings.cookie_max_age_seconds (25h), one hour past token expiry.
    """
    response.set_cookie(
        COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="none",
        secure=_settings.secure_cookies,
        max_age=_settings.cookie_max_age_seconds,
        path="/",
    )


def clear_auth_cookie(response) -> None:
    """Expire the session cookie with the same attributes it was set with."""
    response.delete_cookie(
        COOKIE_NAME,
        path="/",
        secure=_settings.secure_cookies,
        httponly=True,
        samesite="none",
    )
