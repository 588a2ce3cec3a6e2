"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET = "change-me-in-production"  # noqa: S105


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./codelogs.db")

    # Redis (Celery broker)
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Every API route is mounted under /{api_namespace}
    api_namespace: str = Field(default="M01039337")

    # Sessions
    session_cookie_name: str = Field(default="codelogs_session")
    session_ttl_minutes: int = Field(default=60)
    session_sliding: bool = Field(default=False)
    session_cookie_secure: bool = Field(default=False)

    # Password reset tokens
    jwt_secret: str = Field(default=DEFAULT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    reset_token_expiration_minutes: int = Field(default=30)

    # Uploads
    upload_dir: str = Field(default="./uploads")
    uploads_url_path: str = Field(default="/assets/uploads")
    max_upload_bytes: int = Field(default=5 * 1024 * 1024)

    # GitHub gists
    github_api_url: str = Field(default="https://api.github.com")
    gists_limit: int = Field(default=6)

    # API
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if self.jwt_secret == DEFAULT_SECRET:
                raise ValueError("JWT_SECRET must be changed in production")
            if self.database_url.startswith("sqlite") or "localhost" in self.database_url:
                raise ValueError("DATABASE_URL should not use SQLite or localhost in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
