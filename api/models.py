"""
API request and response models for authflow REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are kept
separate from the dataclasses in auth/models.py, which own the internal
domain shape. Route handlers map between the two.

Request fields are Optional on purpose: a missing field is a 400
validation_error raised by AuthService (same message, same code as an empty
string), not a framework-level 422.
"""

from typing import Optional

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    username: Optional[str] = Field(default=None, max_length=255)
    # Length is checked in bytes by AuthService, not here.
    password: Optional[str] = None
    firstname: Optional[str] = Field(default=None, max_length=255)
    lastname: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    username: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a user. The password hash is never part of it."""

    id: int
    username: str
    firstname: str
    lastname: str
    created_at: str


class AuthResponse(BaseModel):
    """Response body for a successful register or login."""

    user: UserResponse
    token: str


class ErrorResponse(BaseModel):
    """The single error body used by every non-2xx response."""

    code: str
    message: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
