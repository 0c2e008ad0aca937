"""
Configuration management for the job portal backend.

Settings come from environment variables and an optional ``.env`` file and
cover the document store backend, first-boot seeding, session tokens and
password hashing.
"""

from functools import lru_cache
from typing import List, Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

ENVIRONMENTS = ("local", "development", "staging", "production", "test")
DOCUMENT_STORES = ("memory", "postgres")


class Settings(BaseSettings):
    """Application settings with defaults suitable for local development."""

    ENVIRONMENT: str = Field(default="local", description="local/development/staging/production/test")
    DEBUG: bool = Field(default=False, description="Debug mode")
    APP_NAME: str = Field(default="Job Portal", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")

    # HTTP server
    HOST: str = Field(default="0.0.0.0", description="Bind address for uvicorn")
    PORT: int = Field(default=8000, description="Bind port for uvicorn")
    CORS_ORIGINS: str = Field(default="*", description="Comma-separated allowed origins")
    LOG_LEVEL: str = Field(default="INFO", description="Minimum structlog level")

    # Sessions
    SECRET_KEY: str = Field(..., description="JWT signing key, at least 32 characters")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT signing algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=15, ge=1, description="Access token lifetime")
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=7, ge=1, description="Refresh token lifetime")
    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=31, description="bcrypt cost factor")

    # Document store
    DOCUMENT_STORE: str = Field(default="memory", description="memory or postgres")
    POSTGRES_URL: Optional[str] = Field(default=None, description="Full URL; overrides the parts below")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    POSTGRES_USER: str = Field(default="portal_user")
    POSTGRES_PASSWORD: str = Field(default="portal_password")
    POSTGRES_DB: str = Field(default="job-portal")
    DB_POOL_SIZE: int = Field(default=10, ge=1, description="Connections kept open")
    DB_MAX_OVERFLOW: int = Field(default=20, ge=0, description="Extra connections under load")
    DB_ECHO: bool = Field(default=False, description="Log every SQL statement")

    # First boot
    SHOULD_INIT: bool = Field(default=False, description="Seed permissions, roles and users on startup")
    INIT_PASSWORD: str = Field(default="123456", description="Password given to seeded users")

    # Listings
    DEFAULT_PAGE_SIZE: int = Field(default=10, ge=1, description="Used when pageSize is missing or invalid")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        if len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Unknown names fall back to 'local'."""
        v = v.lower()
        if v not in ENVIRONMENTS:
            logger.warning("Unknown environment, defaulting to local", environment=v)
            return "local"
        return v

    @field_validator("DOCUMENT_STORE")
    @classmethod
    def validate_document_store(cls, v: str) -> str:
        v = v.lower()
        if v not in DOCUMENT_STORES:
            raise ValueError(f"DOCUMENT_STORE must be one of {', '.join(DOCUMENT_STORES)}")
        return v

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def get_cors_origins(self) -> List[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def get_postgres_url(self) -> str:
        """Async SQLAlchemy URL for the configured database."""
        url = self.POSTGRES_URL or (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )
        for scheme in ("postgresql://", "postgres://"):
            if url.startswith(scheme):
                return "postgresql+asyncpg://" + url[len(scheme):]
        return url


@lru_cache()
def get_settings() -> Settings:
    """Load and cache the settings."""
    settings = Settings()

    logger.info(
        "Settings loaded",
        environment=settings.ENVIRONMENT,
        document_store=settings.DOCUMENT_STORE,
        should_init=settings.SHOULD_INIT,
    )

    return settings
