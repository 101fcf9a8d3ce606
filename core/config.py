"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the Inventory API happen here. No module
should call os.getenv() or os.environ.get() directly -- build a Settings
object (or call get_settings()) and pass it to create_app().

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. asgi.py
      and main.py use it; tests construct Settings(...) explicitly instead.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET, mongodb_uri -> MONGODB_URI).

  frozen=True: the settings object is read-only once validated. The signing
      secret and storage handle are process-wide and never change at runtime.

Security notes:
  JWT_SECRET shorter than 32 chars is rejected outright. HS256 signing relies
  on key entropy -- a short key weakens every issued token.

  In production mode (DEBUG not set or false), a missing JWT_SECRET is a hard
  startup failure. In dev mode a random key is generated with a warning;
  tokens then do not survive a restart.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or inventory/.
"""

import logging
import secrets
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("inventory.config")

_MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields except jwt_secret have defaults. The model_validator enforces
    the secret policy at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    host: str = "0.0.0.0"  # noqa: S104 # nosec B104 -- container deployments bind all interfaces
    port: int = Field(default=3000, ge=1, le=65535)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "inventory"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured". The validator below
    # either generates a dev key or raises, so callers never see "".
    jwt_secret: str = ""
    token_expire_seconds: int = Field(default=3600, gt=0)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="before")
    @classmethod
    def default_dev_secret(cls, data):
        """Generate a throwaway JWT_SECRET in dev mode when none is configured.

        Runs before field validation because the model is frozen -- fields
        cannot be assigned once the instance exists.
        """
        if not isinstance(data, dict):
            return data
        debug = str(data.get("debug", "")).strip().lower() in ("1", "true", "yes", "on")
        if debug and not data.get("jwt_secret"):
            data = {**data, "jwt_secret": secrets.token_hex(32)}
            logger.warning("WARNING: Using auto-generated JWT_SECRET. Tokens will not persist across restarts.")
        return data

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """Refuse to start without a signing secret of adequate length."""
        if not self.jwt_secret:
            raise ValueError(
                "JWT_SECRET is required in production mode. "
                "Set JWT_SECRET in your environment or .env file. "
                "To run in development mode, set DEBUG=true."
            )
        if len(self.jwt_secret) < _MIN_SECRET_LENGTH:
            raise ValueError(f"JWT_SECRET must be at least {_MIN_SECRET_LENGTH} characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
