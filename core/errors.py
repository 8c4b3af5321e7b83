"""
core/errors.py -- Typed failure taxonomy shared by every layer.

Stores and services raise these; only api/main.py turns them into HTTP
responses. Each class carries the stable error code and status the boundary
reports, so route handlers never hand-map exceptions to status codes.

Layer rule: core/ is the kernel. No imports from api/, auth/, or posts/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for expected, request-terminal failures."""

    code = "app_error"
    status_code = 500
    default_message = "Request failed."

    def __init__(self, message: str | None = None, detail: str | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AppError):
    code = "validation_error"
    status_code = 400
    default_message = "Invalid request."


class DuplicateUserError(AppError):
    code = "duplicate_user"
    status_code = 400
    default_message = "Username or email already exists."


class UserNotFoundError(AppError):
    code = "user_not_found"
    status_code = 404
    default_message = "User not found."


class InvalidCredentialsError(AppError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid password."


class UnauthenticatedError(AppError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Authentication required."


class InvalidTokenError(AppError):
    """Raised by the token codec. The auth service converts it to UnauthenticatedError."""

    code = "invalid_token"
    status_code = 401
    default_message = "Invalid token."


class NotFoundError(AppError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found."


class ForbiddenError(AppError):
    code = "forbidden"
    status_code = 403
    default_message = "Not authorised to modify this resource."


class StoreError(AppError):
    """Wraps a persistence failure. The original exception is chained, not exposed."""

    code = "store_error"
    status_code = 500
    default_message = "Storage operation failed."
