"""
client/actions.py -- Login, signup and logout actions.

Each network action follows the same sequence:

  1. dispatch AUTH_START
  2. call the API
  3a. success: dispatch AUTH_SUCCESS with {user, token}, then
      navigate(landing_route, replace=True)
  3b. failure: log the detail, dispatch AUTH_FAIL carrying an AuthFailure.
      No retry and no navigation.

The call and the navigation share one failure path. An exception from
navigate, or anything unexpected from the API layer, also ends in AUTH_FAIL
(kind "client_error"), so the state never stays authenticated after a
failed hand-off.

log_out() dispatches LOG_OUT and makes no request.

navigate is any callable taking (path, replace=...) -- a router hook in a
UI, or a print in the CLI.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from client.api import AuthApi, AuthRequestError
from client.state import AUTH_FAIL, AUTH_START, AUTH_SUCCESS, LOG_OUT, Action, AuthFailure, AuthState, AuthStateStore

logger = logging.getLogger("authflow.client.actions")

Navigate = Callable[..., None]

DEFAULT_LANDING_ROUTE = "/home"


class AuthActions:
    def __init__(
        self,
        api: AuthApi,
        store: Optional[AuthStateStore] = None,
        landing_route: str = DEFAULT_LANDING_ROUTE,
    ) -> None:
        self.api = api
        self.store = store or AuthStateStore()
        self.landing_route = landing_route

    def log_in(self, form_data: dict, navigate: Navigate) -> AuthState:
        return self._authenticate("Login", self.api.log_in, form_data, navigate)

    def sign_up(self, form_data: dict, navigate: Navigate) -> AuthState:
        return self._authenticate("Signup", self.api.sign_up, form_data, navigate)

    def log_out(self) -> AuthState:
        return self.store.dispatch(Action(LOG_OUT))

    def _authenticate(self, label: str, call: Callable[[dict], dict], form_data: dict, navigate: Navigate) -> AuthState:
        self.store.dispatch(Action(AUTH_START))
        try:
            data = call(form_data)
            state = self.store.dispatch(Action(AUTH_SUCCESS, data=data))
            navigate(self.landing_route, replace=True)
        except AuthRequestError as e:
            logger.error("%s Error: %s", label, e.detail())
            failure = AuthFailure(kind=e.code, message=e.message, status_code=e.status_code)
            return self.store.dispatch(Action(AUTH_FAIL, error=failure))
        except Exception as e:
            logger.exception("%s Error: %s", label, e)
            failure = AuthFailure(kind="client_error", message=str(e) or type(e).__name__)
            return self.store.dispatch(Action(AUTH_FAIL, error=failure))
        return state
