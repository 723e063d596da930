"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for authflow happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Singleton via lru_cache: get_settings() instantiates Settings once at first
call and returns the cached instance on every subsequent call. The auth
service never reads settings on its own; api/main.py passes the values it
needs (signing key, expiry, bcrypt rounds) into AuthService at construction.

Security notes:
  JWT_KEY shorter than 32 chars is rejected outright. HS256 signing relies
  on key entropy -- a short key weakens every token issued with it.

  In production mode (DEBUG not set or false), a missing JWT_KEY is a hard
  startup failure. In debug mode a random key is generated with a warning.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or client/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("authflow.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'auth' / 'authflow.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    # JWTKEY is the name existing deployments already export.
    jwt_key: str = Field(default="", validation_alias=AliasChoices("JWTKEY", "JWT_KEY", "jwt_key"))
    token_expire_seconds: int = 3600

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_jwt_key(self) -> "Settings":
        """Enforce the signing key policy.

        Debug mode: auto-generate a random key with a warning. Tokens will
            not survive a restart -- acceptable for local development.

        Production mode: refuse to start without a key.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.jwt_key:
            if self.debug:
                self.jwt_key = secrets.token_hex(32)
                logger.warning("Using auto-generated JWT_KEY. Tokens will not persist across restarts.")
            else:
                raise ValueError(
                    "JWT_KEY is required in production mode. "
                    "Set JWTKEY (or JWT_KEY) in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.jwt_key) < 32:
            raise ValueError("JWT_KEY must be at least 32 characters.")
        return self


class ClientSettings(BaseSettings):
    """Settings for the client side (CLI, scripts).

    Kept apart from Settings so a client can start without the server's
    signing key in its environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: str = "http://localhost:8000"
    landing_route: str = "/home"
    request_timeout: float = 10.0


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
