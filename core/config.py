"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for CityInfo happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): values come from environment variables and
      an optional .env file. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY, auth_issuer -> AUTH_ISSUER).

  @model_validator(mode="after"): dev mode (DEBUG=true) generates a signing key
      with a warning, production mode refuses to start without one.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or cities/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("cityinfo.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'cities' / 'cityinfo.db'}"


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
    # Empty string means "not configured"; the validator below resolves it.
    secret_key: str = ""
    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Token issuing
    # ------------------------------------------------------------------

    auth_issuer: str = "https://localhost:7169"
    auth_audience: str = "cityinfoapi"
    token_expire_seconds: int = 3600

    # ------------------------------------------------------------------
    # Authorization policy (v2 point-of-interest routes)
    # ------------------------------------------------------------------

    city_policy_name: str = "MustBeFromAntwerp"
    city_policy_city: str = "Antwerp"

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------

    default_cities_page_size: int = 10
    max_cities_page_size: int = 20

    # ------------------------------------------------------------------
    # Mail
    # ------------------------------------------------------------------

    mail_to: str = "admin@mycompany.com"
    mail_from: str = "noreply@mycompany.com"

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    login_rate_limit: str = "10/minute"
    allowed_hosts: list[str] = ["localhost", "127.0.0.1", "*.localhost"]
    cors_origins: list[str] = ["http://localhost", "http://localhost:3000"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Resolve SECRET_KEY and enforce its minimum length.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Issued tokens do not survive a restart.

        Production mode: refuse to start without SECRET_KEY.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("Using auto-generated SECRET_KEY. Issued tokens will not survive a restart.")
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        if self.max_cities_page_size < 1 or self.default_cities_page_size < 1:
            raise ValueError("Page sizes must be at least 1.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
