# This project was developed with assistance from AI tools.
"""
Application configuration.

All settings read from environment variables with sensible local dev defaults.
Group related settings together; each group becomes a section future PRs extend.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve project root .env regardless of CWD
_PROJECT_ROOT = Path(__file__).resolve().parents[4]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings -- single source of truth for env-driven config."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- App --
    APP_BASE_URL: str = Field(
        default="http://localhost:3000",
        description="Public URL of the portal front-end, used in notification links.",
    )

    # -- CORS --
    ALLOWED_HOSTS: list[str] = ["http://localhost:3000"]

    # -- Auth --
    AUTH_DISABLED: bool = Field(
        default=False,
        description="Bypass JWT validation. Set True for tests and local dev without the auth provider.",
    )
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_JWT_SECRET: str | None = Field(
        default=None,
        description="Shared HS256 secret. When unset, tokens are verified against the provider JWKS.",
    )
    JWT_AUDIENCE: str = "authenticated"
    JWKS_CACHE_TTL: int = Field(
        default=300,
        description="JWKS cache lifetime in seconds (default 5 minutes).",
    )

    # -- Email (SMTP) --
    SMTP_HOST: str | None = Field(
        default=None,
        description="SMTP relay host. When unset, notifications are stored in-app only.",
    )
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_USE_TLS: bool = True
    SMTP_FROM_EMAIL: str = "noreply@partnersllc.com"
    SMTP_FROM_NAME: str = "Partners LLC"
    SMTP_TIMEOUT: int = 10

    # -- Legal documents --
    LEGAL_DOCS_DIR: Path = _PROJECT_ROOT / "doc_leg"

    # -- Payment links --
    PAYMENT_LINK_TTL_HOURS: int = Field(
        default=72,
        description="Lifetime applied to links created without an explicit expiry.",
    )


settings = Settings()
