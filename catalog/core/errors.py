"""Domain errors raised by services and auth dependencies, mapped to HTTP responses by the API layer."""

from typing import Any


class CatalogError(Exception):
    """Base error. Carries the HTTP status and a client-facing message."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid input data"


class DuplicateEmail(CatalogError):
    """Email already registered."""

    status_code = 400
    default_message = "Email is already registered"


class AuthError(CatalogError):
    status_code = 401
    default_message = "Authentication failed"


class InvalidCredentials(AuthError):
    """Login failure. Same message for unknown email, inactive user and wrong password."""

    default_message = "Invalid credentials"


class Unauthorized(AuthError):
    default_message = "Access token required"


class InvalidToken(AuthError):
    """Bad signature, malformed payload or expired token."""

    default_message = "Invalid token"


class Forbidden(CatalogError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFound(CatalogError):
    status_code = 404
    default_message = "Resource not found"


class InternalError(CatalogError):
    """Unexpected store or runtime failure; details carry the underlying message."""

    status_code = 500
