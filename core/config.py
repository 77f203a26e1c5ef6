"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for postgate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs after all fields are resolved. A missing
      JWT_SECRET is a hard failure at construction time, so the lifespan refuses
      to start the server instead of failing on the first authenticated request.

Injection: the Settings instance is handed to TokenService at startup. Nothing
in auth/ or posts/ reads the secret from a module global.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or posts/.
"""

import logging
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("postgate.config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    jwt_secret has no usable default: constructing Settings without it raises.
    Everything else has a default so a local run only needs JWT_SECRET.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured"; the validator rejects it.
    jwt_secret: str = ""
    token_expire_seconds: int = 3600

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = "sqlite:///postgate.db"

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"  # noqa: S104 # nosec B104 -- container bind address
    port: int = 3000
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """Refuse to build a Settings object without a signing secret.

        Short secrets are accepted but logged: HS256 is only as strong as the
        key, and existing deployments may already issue tokens with one.
        """
        if not self.jwt_secret:
            raise ValueError("JWT_SECRET is required. Set JWT_SECRET in your environment or .env file.")
        if len(self.jwt_secret) < 32:
            logger.warning("JWT_SECRET is shorter than 32 characters; consider a longer random value.")
        if self.token_expire_seconds <= 0:
            raise ValueError("TOKEN_EXPIRE_SECONDS must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
