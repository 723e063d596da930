"""
client/state.py -- Client-side auth state, actions, and reducer.

The state moves only through dispatched actions:

  AUTH_START    -> loading        (user, token and error cleared)
  AUTH_SUCCESS  -> authenticated  (payload {user, token} stored)
  AUTH_FAIL     -> failed         (AuthFailure stored on error)
  LOG_OUT       -> idle           (everything cleared)

auth_reducer() is pure: it never mutates the state it is given.
AuthStateStore holds the current state and notifies subscribers after each
dispatch.

Layer rule: client/ talks to the server over HTTP only. No imports from
api/ or auth/.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger("authflow.client.state")

AUTH_START = "AUTH_START"
AUTH_SUCCESS = "AUTH_SUCCESS"
AUTH_FAIL = "AUTH_FAIL"
LOG_OUT = "LOG_OUT"


class AuthStatus(str, Enum):
    idle = "idle"
    loading = "loading"
    authenticated = "authenticated"
    failed = "failed"


@dataclass(frozen=True)
class AuthFailure:
    """Why the last login or signup failed.

    kind is the server's error code ("conflict", "not_found", ...) or
    "network" when no response arrived, or "client_error" when the failure
    happened on this side (for example in navigate). status_code is None
    unless a response arrived.
    """

    kind: str
    message: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class AuthState:
    status: AuthStatus = AuthStatus.idle
    user: Optional[dict] = None
    token: Optional[str] = None
    error: Optional[AuthFailure] = None

    @property
    def is_authenticated(self) -> bool:
        return self.status is AuthStatus.authenticated


@dataclass(frozen=True)
class Action:
    type: str
    data: dict = field(default_factory=dict)
    error: Optional[AuthFailure] = None


def auth_reducer(state: AuthState, action: Action) -> AuthState:
    """Return the state that follows from applying action to state."""
    if action.type == AUTH_START:
        return AuthState(status=AuthStatus.loading)
    if action.type == AUTH_SUCCESS:
        return AuthState(
            status=AuthStatus.authenticated,
            user=action.data.get("user"),
            token=action.data.get("token"),
        )
    if action.type == AUTH_FAIL:
        return replace(state, status=AuthStatus.failed, user=None, token=None, error=action.error)
    if action.type == LOG_OUT:
        return AuthState()
    return state


class AuthStateStore:
    """Holds the current AuthState and applies dispatched actions to it."""

    def __init__(self, initial: Optional[AuthState] = None) -> None:
        self._state = initial or AuthState()
        self._listeners: list[Callable[[AuthState], Any]] = []

    @property
    def state(self) -> AuthState:
        return self._state

    def dispatch(self, action: Action) -> AuthState:
        self._state = auth_reducer(self._state, action)
        logger.debug("%s -> %s", action.type, self._state.status.value)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Callable[[AuthState], Any]) -> Callable[[], None]:
        """Register listener; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
