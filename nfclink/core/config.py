# nfclink/core/config.py
"""
Application configuration using pydantic-settings.

Security considerations:
- The store URL and access key come from the environment only
- Missing store configuration does not crash startup; store-backed
  endpoints answer 503 instead
- CORS_ORIGINS parsed from comma-separated env var, never defaults to "*"
- Raw magic links are never returned in production
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """
    Strictly typed application settings.

    Priority for loading:
    1. Environment variables (highest priority)
    2. .env file (via pydantic-settings)
    3. Default values (lowest priority, dev-safe only)
    """

    # ─────────────────────────────────────────────────────────────
    # Application metadata
    # PROJECT_NAME doubles as the TOTP issuer shown in authenticator apps
    # ─────────────────────────────────────────────────────────────
    PROJECT_NAME: str = "NFC Link Manager"
    PROJECT_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Public base URL of the frontend, used to build magic links
    APP_URL: str = "http://localhost:3000"

    # ─────────────────────────────────────────────────────────────
    # Record store
    # DATABASE_URL + DATABASE_KEY must both be set (SQLite needs no key).
    # Without them the app still boots and reports 503 per request.
    # ─────────────────────────────────────────────────────────────
    DATABASE_URL: Optional[str] = None
    DATABASE_KEY: Optional[str] = None
    DATABASE_ECHO: bool = False

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def normalize_database_url(cls, v: Optional[str]) -> Optional[str]:
        """
        Normalize database URLs for async SQLAlchemy compatibility.

        Conversions:
        - postgres://     → postgresql+asyncpg://  (hosted Postgres style)
        - postgresql://   → postgresql+asyncpg://  (standard PostgreSQL)
        - sqlite:///      → sqlite+aiosqlite:///   (local development)
        """
        if v is None:
            return None

        url = v.strip()
        if not url:
            return None

        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+asyncpg://", 1)

        if url.startswith("postgresql://") and "+asyncpg" not in url:
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)

        if url.startswith("sqlite:///") and "+aiosqlite" not in url:
            return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

        return url

    # ─────────────────────────────────────────────────────────────
    # Login hardening
    # A source address is blocked once its failed attempts inside the
    # trailing window EXCEED LOGIN_MAX_FAILED_ATTEMPTS
    # ─────────────────────────────────────────────────────────────
    LOGIN_WINDOW_MINUTES: int = 10
    LOGIN_MAX_FAILED_ATTEMPTS: int = 5

    MAGIC_LINK_EXPIRE_MINUTES: int = 60
    RETURN_MAGIC_LINK: bool = True

    TRUSTED_DEVICE_DAYS: int = 30
    RECOVERY_CODE_COUNT: int = 10

    # ─────────────────────────────────────────────────────────────
    # CORS Configuration
    # ─────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def BACKEND_CORS_ORIGINS(self) -> List[str]:
        """
        Parse CORS_ORIGINS string into a list of allowed origins.

        Empty string returns empty list, NOT wildcard "*".
        """
        if not self.CORS_ORIGINS or not self.CORS_ORIGINS.strip():
            return []

        return [
            origin.strip()
            for origin in self.CORS_ORIGINS.split(",")
            if origin.strip()
        ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database (local development)."""
        return bool(self.DATABASE_URL) and "sqlite" in self.DATABASE_URL.lower()

    @property
    def store_configured(self) -> bool:
        """True when enough is known to reach the record store."""
        if not self.DATABASE_URL:
            return False
        return self.is_sqlite or bool(self.DATABASE_KEY)

    @property
    def database_dsn(self) -> str:
        """DATABASE_URL with DATABASE_KEY applied as the connection password."""
        url = make_url(self.DATABASE_URL)
        if self.DATABASE_KEY and not self.is_sqlite:
            url = url.set(password=self.DATABASE_KEY)
        return url.render_as_string(hide_password=False)

    @property
    def expose_magic_link(self) -> bool:
        return self.RETURN_MAGIC_LINK and not self.is_production


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings instance.

    Settings are read from the environment once per process.
    """
    return Settings()


settings = get_settings()
