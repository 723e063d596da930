"""
api/routes/auth.py -- Registration and login REST endpoints.

Routes:
  POST /auth/register  -- create an account; returns {user, token}
  POST /auth/login     -- check credentials; returns {user, token}
  GET  /auth/me        -- user behind a Bearer token (requires auth)

Error handling:
  Each handler is its own error boundary. Expected failures arrive as
  AuthServiceError subclasses and are rendered with their status and code.
  Any other exception is logged with its traceback and answered with a
  generic 500 -- the raw exception never reaches the response body.

  Every error body has the same shape: {"code": ..., "message": ...}.

Cache-Control: no-store on register/login responses, which carry a token.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.models import AuthResponse, ErrorResponse, LoginRequest, RegisterRequest, UserResponse
from auth.dependencies import get_auth_service, get_current_user
from auth.errors import AuthServiceError, ServerError
from auth.models import User
from auth.service import AuthService

logger = logging.getLogger("authflow.api.auth")

# Auth policy:
# - POST /auth/register: public
# - POST /auth/login:    public
# - GET  /auth/me:       requires a Bearer token (get_current_user)
router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/auth/register", response_model=AuthResponse, responses=_ERROR_RESPONSES)
async def register(
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Register a new user and return it with a token."""
    try:
        result = await service.register_user(
            username=body.username,
            password=body.password,
            firstname=body.firstname,
            lastname=body.lastname,
        )
    except AuthServiceError as exc:
        logger.info("Registration rejected for %r: %s", body.username, exc.code)
        return _error_response(exc)
    except Exception:
        logger.exception("Error during registration")
        return _error_response(ServerError("Server Error during registration"))
    return _token_response(result.to_dict())


@router.post("/auth/login", response_model=AuthResponse, responses=_ERROR_RESPONSES)
async def login(
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Authenticate with username and password and return the user with a token.

    Unknown username (404) and wrong password (400) are reported separately.
    """
    try:
        result = await service.login_user(username=body.username, password=body.password)
    except AuthServiceError as exc:
        logger.info("Login rejected for %r: %s", body.username, exc.code)
        return _error_response(exc)
    except Exception:
        logger.exception("Error during login")
        return _error_response(ServerError("Server Error during login"))
    return _token_response(result.to_dict())


@router.get("/auth/me", response_model=UserResponse, responses={401: {"model": ErrorResponse}})
async def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the account the presented token belongs to."""
    return UserResponse(**current_user.public_view())


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _token_response(content: dict) -> JSONResponse:
    resp = JSONResponse(status_code=200, content=AuthResponse(**content).model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp


def _error_response(exc: AuthServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(**exc.to_dict()).model_dump(),
    )
