"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The backend endpoint and public key are validated at
load time; a missing or malformed value is fatal for anything that
touches the backend.
"""

from functools import lru_cache
from urllib.parse import urlparse

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults except supabase_url and supabase_anon_key,
    which are validated in validate_backend.
    """

    # App
    app_name: str = "planejar"
    app_version: str = "1.0.0"
    debug: bool = False

    # Backend (identity + relational store + object storage)
    supabase_url: str = ""
    supabase_anon_key: SecretStr = SecretStr("")
    http_timeout_seconds: float = 30.0

    # Storage
    storage_bucket: str = "project-files"
    storage_cache_control: str = "3600"

    # Password recovery redirect: APP_BASE_URL + PASSWORD_RESET_PATH
    app_base_url: str = "http://localhost:3000"
    password_reset_path: str = "/reset-password"

    # Local session persistence (offline restore)
    session_cache_path: str = "~/.planejar/session.json"

    # Retry: identity provider calls (attempts, base delay + uniform jitter, seconds)
    auth_retry_attempts: int = 3
    auth_retry_base_delay: float = 1.0
    auth_retry_jitter: float = 2.0
    # Retry: mirrored user row write after sign-up (fixed delay)
    db_retry_attempts: int = 3
    db_retry_delay: float = 0.5

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backend(self) -> "Settings":
        """Validate backend endpoint and key.

        - SUPABASE_URL and SUPABASE_ANON_KEY are both required.
        - SUPABASE_URL must be an absolute http(s) URL.
        """
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_anon_key.get_secret_value():
            missing.append("SUPABASE_ANON_KEY")
        if missing:
            raise ValueError(
                f"Missing backend configuration: {', '.join(missing)}. "
                "Set in environment or .env file."
            )
        parsed = urlparse(self.supabase_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid SUPABASE_URL format: {self.supabase_url!r}")
        if self.auth_retry_attempts < 1 or self.db_retry_attempts < 1:
            raise ValueError("Retry attempts must be at least 1")
        return self

    @property
    def password_reset_redirect_url(self) -> str:
        """Absolute URL the recovery e-mail links back to."""
        return f"{self.app_base_url.rstrip('/')}/{self.password_reset_path.lstrip('/')}"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
