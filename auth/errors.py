"""
auth/errors.py -- Error taxonomy for the register / login flow.

Every expected failure is an AuthServiceError subclass carrying the HTTP
status it maps to and a stable machine-readable code. Route handlers render
these directly; anything that is not an AuthServiceError is unexpected and
becomes a generic 500 at the route boundary.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations


class AuthServiceError(Exception):
    """Base class for expected auth failures."""

    status_code: int = 500
    code: str = "server_error"
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(AuthServiceError):
    """A required field is missing or empty."""

    status_code = 400
    code = "validation_error"
    default_message = "All fields are required."


class ConflictError(AuthServiceError):
    """The username is already taken. Raised only by the store's UNIQUE constraint."""

    status_code = 400
    code = "conflict"
    default_message = "User already exists"


class NotFoundError(AuthServiceError):
    status_code = 404
    code = "not_found"
    default_message = "User not found"


class AuthError(AuthServiceError):
    status_code = 400
    code = "incorrect_password"
    default_message = "Incorrect password"


class ServerError(AuthServiceError):
    status_code = 500
    code = "server_error"
    default_message = "Server Error"
