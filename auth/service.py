"""
auth/service.py -- Register and login use cases.

AuthService owns the whole credential flow: presence checks, bcrypt hashing
and comparison, the user store, and token issuance. It is built once at
startup with everything it needs injected (store, signing key, expiry, bcrypt
cost) and holds no other state, so every call is independent.

Both operations are coroutines. bcrypt and the SQLAlchemy store are blocking,
so each of those calls runs in Starlette's thread pool and the event loop
keeps serving other requests meanwhile.

Expected failures raise the AuthServiceError subclasses from auth/errors.py.
Anything else propagates unchanged; the route boundary turns it into a 500.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from starlette.concurrency import run_in_threadpool

from auth.errors import AuthError, NotFoundError, ValidationError
from auth.models import User
from auth.store import UserStore
from auth.tokens import (
    DEFAULT_EXPIRE_SECONDS,
    MAX_PASSWORD_BYTES,
    create_access_token,
    decode_access_token,
    hash_password,
    password_fits,
    verify_password,
)

logger = logging.getLogger("authflow.auth.service")

PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_BYTES} bytes."


def _check_password_length(password: str) -> None:
    # Counted in UTF-8 bytes: bcrypt cannot hash anything longer.
    if not password_fits(password):
        raise ValidationError(PASSWORD_TOO_LONG)


@dataclass
class AuthResult:
    """A user together with a freshly issued token."""

    user: User
    token: str

    def to_dict(self) -> dict:
        return {"user": self.user.public_view(), "token": self.token}


class AuthService:
    def __init__(
        self,
        store: UserStore,
        secret_key: str,
        token_expire_seconds: int = DEFAULT_EXPIRE_SECONDS,
        bcrypt_rounds: int = 10,
    ) -> None:
        if not secret_key:
            raise ValueError("AuthService requires a non-empty secret_key")
        self.store = store
        self._secret_key = secret_key
        self.token_expire_seconds = token_expire_seconds
        self.bcrypt_rounds = bcrypt_rounds

    # ------------------------------------------------------------------
    # Use cases
    # ------------------------------------------------------------------

    async def register_user(
        self,
        username: str | None,
        password: str | None,
        firstname: str | None,
        lastname: str | None,
    ) -> AuthResult:
        """Create an account and return it with a token.

        Raises:
            ValidationError: any of the four fields is missing or empty,
                             or the password is over MAX_PASSWORD_BYTES.
            ConflictError:   the username is taken (from the store's UNIQUE constraint).
        """
        if not (username and password and firstname and lastname):
            raise ValidationError("All fields are required.")
        _check_password_length(password)

        hashed = await run_in_threadpool(hash_password, password, self.bcrypt_rounds)
        user = await run_in_threadpool(
            self.store.create_user,
            User(username=username, password=hashed, firstname=firstname, lastname=lastname),
        )
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return AuthResult(user=user, token=self.issue_token(user))

    async def login_user(self, username: str | None, password: str | None) -> AuthResult:
        """Check a username/password pair and return the user with a token.

        Raises:
            ValidationError: username or password missing or empty,
                             or the password is over MAX_PASSWORD_BYTES.
            NotFoundError:   no such username.
            AuthError:       password does not match.
        """
        if not (username and password):
            raise ValidationError("Username and password are required.")
        _check_password_length(password)

        user = await run_in_threadpool(self.store.get_by_username, username)
        if user is None:
            raise NotFoundError()

        valid = await run_in_threadpool(verify_password, password, user.password)
        if not valid:
            logger.info("Incorrect password for %s", username)
            raise AuthError()

        logger.info("Login: %s (id=%s)", user.username, user.id)
        return AuthResult(user=user, token=self.issue_token(user))

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def issue_token(self, user: User) -> str:
        return create_access_token(
            user_id=user.id,
            username=user.username,
            secret_key=self._secret_key,
            expire_seconds=self.token_expire_seconds,
        )

    def decode_token(self, token: str) -> dict | None:
        """Return the token's claims, or None if it is invalid or expired."""
        return decode_access_token(token, self._secret_key)

    async def get_user_for_token(self, token: str) -> User | None:
        """Resolve a token to its stored user. None if the token is bad or the user is gone."""
        payload = self.decode_token(token)
        if payload is None:
            return None
        user = await run_in_threadpool(self.store.get_by_id, payload["id"])
        if user is None or user.username != payload["username"]:
            return None
        return user
