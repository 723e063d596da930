"""
client/api.py -- HTTP calls to the authflow API.

A requests.Session is shared across calls for connection pooling.
max_redirects=3 replaces the requests default of 30; the auth endpoints
never redirect, so anything beyond a few hops is a misconfiguration.

Every failure -- transport error, non-2xx status, or a body that is not
JSON -- is raised as AuthRequestError so callers handle exactly one type.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger("authflow.client.api")


class AuthRequestError(Exception):
    """A register or login call did not succeed.

    status_code is None when no HTTP response was received.
    """

    def __init__(self, code: str, message: str, status_code: Optional[int] = None) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def detail(self) -> dict[str, Any]:
        return {"status_code": self.status_code, "code": self.code, "message": self.message}


class AuthApi:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.max_redirects = 3

    def log_in(self, form_data: dict) -> dict:
        """POST /auth/login; returns the {user, token} body."""
        return self._post("/auth/login", form_data)

    def sign_up(self, form_data: dict) -> dict:
        """POST /auth/register; returns the {user, token} body."""
        return self._post("/auth/register", form_data)

    def close(self) -> None:
        self._session.close()

    def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise AuthRequestError("network", str(e)) from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.ok:
            if isinstance(body, dict):
                code = body.get("code", f"http_{resp.status_code}")
                message = body.get("message", resp.reason or "")
            else:
                code = f"http_{resp.status_code}"
                message = resp.reason or ""
            raise AuthRequestError(code, message, resp.status_code)

        if not isinstance(body, dict):
            raise AuthRequestError("bad_response", f"Unexpected response body from {path}", resp.status_code)
        return body
