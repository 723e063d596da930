"""
auth/tokens.py -- Password hashing and JWT utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry username, id and expiry. The
       signing key is always passed in by the caller (AuthService holds it);
       this module never reads configuration. Verification returns None on
       any failure -- the caller turns that into a 401.

  Passwords: bcrypt directly (no passlib wrapper). gensalt() draws a fresh
       random salt per call, so two users with the same password get
       different hashes. The cost factor is configurable; the service default
       is 10 rounds.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

logger = logging.getLogger("authflow.auth.tokens")

_ALGORITHM = "HS256"
DEFAULT_EXPIRE_SECONDS = 3600

# bcrypt rejects (5.x) or truncates (4.x) input past this many bytes.
MAX_PASSWORD_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def password_fits(plain: str) -> bool:
    """Return True if the UTF-8 encoding of plain is within MAX_PASSWORD_BYTES."""
    return len(plain.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(plain: str, rounds: int = 10) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Raises ValueError if the password is longer than MAX_PASSWORD_BYTES once
    encoded. AuthService checks this first and reports a ValidationError.
    """
    if not password_fits(plain):
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    if not password_fits(plain):
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        # Malformed stored hash -- treat as a mismatch.
        return False


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: int,
    username: str,
    secret_key: str,
    expire_seconds: int = DEFAULT_EXPIRE_SECONDS,
) -> str:
    """Encode a signed JWT carrying the user's identity.

    Args:
        user_id:        Numeric user ID stored in the DB.
        username:       Username of the account.
        secret_key:     HS256 signing key.
        expire_seconds: Lifetime of the token. Defaults to one hour.
    """
    expire = datetime.now(timezone.utc) + timedelta(seconds=expire_seconds)
    payload = {
        "username": username,
        "id": user_id,
        "exp": expire,
    }
    return jwt.encode(payload, secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str, secret_key: str) -> dict | None:
    """Decode and verify a JWT. Returns the payload dict or None on any failure.

    Expired tokens, bad signatures and tokens missing the identity claims all
    come back as None.
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        logger.debug("Rejected token: %s", exc)
        return None
    if "id" not in payload or "username" not in payload:
        return None
    return payload
