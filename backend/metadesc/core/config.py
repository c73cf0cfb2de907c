"""
Core configuration and settings for the AI Meta Description service.
"""

import json
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Used only outside production/staging when no secret is configured
DEVELOPMENT_FALLBACK_SECRET = "meta-description-development-fallback-key-do-not-use-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "AI Meta Description"
    app_version: str = "1.4.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = Field(default=["http://localhost:5173", "http://localhost:3000"])

    # Database (options + descriptions)
    database_url: str = "sqlite+aiosqlite:///./data/meta_description.db"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Authentication
    auth_enabled: bool = False
    session_secret: str | None = None
    encryption_key: str | None = None
    access_token_lifetime_seconds: int = 3600
    nonce_lifetime_seconds: int = 86400  # same lifetime as a WordPress nonce

    # Options store
    option_prefix: str = "meta_description_"

    # Description length window fed into the prompt
    description_min_length: int = 120
    description_max_length: int = 160

    # Outbound vendor calls
    models_timeout_seconds: float = 15.0
    generate_timeout_seconds: float = 30.0

    @property
    def is_production(self) -> bool:
        return self.environment in ("production", "staging")

    @property
    def is_auth_enabled(self) -> bool:
        return self.auth_enabled

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """Parse CORS origins from JSON string if needed."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, treat as comma-separated
                return [s.strip() for s in v.split(",")]
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL"""
        if not v:
            raise ValueError("database_url cannot be empty")
        return v

    @field_validator("description_max_length")
    @classmethod
    def validate_length_window(cls, v: int, info: Any) -> int:
        min_length = info.data.get("description_min_length", 0)
        if v < min_length:
            raise ValueError("description_max_length must be >= description_min_length")
        return v

    def get_secret(self, preferred: str | None = None) -> str:
        """Return a signing/encryption secret, refusing the fallback in production."""
        secret = preferred or self.session_secret
        if secret:
            return secret
        if self.is_production:
            raise RuntimeError(
                "SESSION_SECRET must be set in production/staging environments."
            )
        return DEVELOPMENT_FALLBACK_SECRET


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
