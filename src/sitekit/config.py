"""Application configuration.

Two layers:

- ``Settings`` holds typed application settings loaded with pydantic-settings.
- ``EnvConfig`` is a plain string-keyed lookup over the environment, used by
  components that need to fail fast on a missing key (e.g. the cache factory).
"""

import os
import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from sitekit.core.constants import (
    DEFAULT_REDACT_PATHS,
    SESSION_COOKIE_MAX_AGE_SECONDS,
    SESSION_COOKIE_NAME,
)
from sitekit.core.errors import ConfigurationError


_MISSING: Any = object()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "sitekit"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Sessions
    session_cookie_name: str = SESSION_COOKIE_NAME
    session_cookie_max_age: int = SESSION_COOKIE_MAX_AGE_SECONDS
    session_cookie_secure: bool = True

    # Upstream API
    api_base_url: str | None = None

    # Observability
    log_level: str = "INFO"
    log_redact: list[str] = DEFAULT_REDACT_PATHS

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class EnvConfig:
    """String-keyed configuration lookup.

    Reads from ``os.environ`` unless another mapping is supplied.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def _get_or_default(self, key: str, default: str = _MISSING) -> str:
        if key not in self._environ:
            if default is _MISSING:
                raise ConfigurationError(key=key)
            return default
        return self._environ[key]

    def get(self, key: str, default: str = _MISSING) -> str:
        """Get the value at ``key``.

        Args:
            key: Configuration key
            default: Fallback when the key is absent

        Returns:
            The configured value

        Raises:
            ConfigurationError: If the key is absent and no default is given
        """
        return self._get_or_default(key, default)

    def has(self, key: str) -> bool:
        """Return True if ``key`` is present with a non-empty value."""
        return bool(self._get_or_default(key, ""))

    def list(self, key: str, delimiter: str = ",") -> list[str]:
        """Split the value at ``key`` into trimmed items.

        Raises:
            ConfigurationError: If the key is absent
        """
        items = self._get_or_default(key)
        return [item.strip() for item in re.split(rf"\s*{re.escape(delimiter)}\s*", items)]
