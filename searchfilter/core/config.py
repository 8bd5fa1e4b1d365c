"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. USER_ID_REGEX is required and checked at load time;
the middleware compiles it when the app is built.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "searchfilter"
    app_version: str = "1.0.0"
    debug: bool = False

    # Filter: allow-list pattern for user IDs, and whether Last-Modified survives
    user_id_regex: str
    last_modified: bool = False

    # Upstream homeserver
    upstream_url: str = "http://localhost:8008"
    upstream_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_filter_and_upstream(self) -> "Settings":
        """Reject an empty allow-list pattern and a non-http upstream URL."""
        if not self.user_id_regex:
            raise ValueError(
                "USER_ID_REGEX is required, e.g. ^@[a-z0-9._=\\-/+]+:example\\.com$. "
                "Set in environment or .env file."
            )
        if not self.upstream_url.startswith(("http://", "https://")):
            raise ValueError(
                f"upstream_url must start with http:// or https://, got: {self.upstream_url!r}"
            )
        self.upstream_url = self.upstream_url.rstrip("/")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
