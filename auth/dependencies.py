"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

get_auth_service() hands route handlers the AuthService built in the app
lifespan. get_current_user() reads an "Authorization: Bearer <token>" header,
verifies the token statelessly, and returns the stored User or raises 401.

Layer rule: no imports from api/, client/, or core/.
  auth/dependencies.py may import from fastapi (for Depends/HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from auth.models import User
from auth.service import AuthService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_current_user(
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> User:
    """Require a valid Bearer token. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)): ...
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        token = ""
    token = token.strip()
    user = await service.get_user_for_token(token) if token else None
    if user is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
        )
    return user
