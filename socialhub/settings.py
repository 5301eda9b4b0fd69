"""Application settings and configuration."""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: DATABASE_URL, JWT_ACCESS_SECRET, RATE_LIMIT_ENABLED
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field("SocialHub API")
    app_version: str = Field("1.0.0")
    debug: bool = Field(False)
    environment: str = Field("development")
    host: str = Field("0.0.0.0")
    port: int = Field(8000)

    # Database settings
    database_url: str = Field(
        default="sqlite+aiosqlite:///./socialhub.db",
        description="Database connection URL",
    )

    # Redis settings
    redis_url: str = Field("redis://localhost:6379/0")

    # JWT settings
    jwt_access_secret: str = Field("access-secret-change-in-production")
    jwt_refresh_secret: str = Field("refresh-secret-change-in-production")
    jwt_algorithm: str = Field("HS256")
    access_token_expire_minutes: int = Field(15)
    refresh_token_expire_days: int = Field(7)

    # Password reset settings
    password_reset_expire_minutes: int = Field(60)
    expose_reset_token: bool = Field(
        default=False,
        description="Return the reset ticket in the API response (development only)",
    )

    # Story settings
    story_expire_hours: int = Field(24)

    # Security settings
    bcrypt_rounds: int = Field(12)

    # CORS settings
    allowed_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Rate limiting settings
    rate_limit_enabled: bool = Field(True)
    rate_limit_max_requests: int = Field(100)
    rate_limit_window_seconds: int = Field(900)

    # Celery settings
    celery_broker_url: str = Field("redis://localhost:6379/0")
    celery_result_backend: str = Field("redis://localhost:6379/0")
    celery_task_always_eager: bool = Field(False)

    # Email settings
    smtp_host: Optional[str] = Field(None)
    smtp_port: int = Field(587)
    smtp_user: Optional[str] = Field(None)
    smtp_password: Optional[str] = Field(None)
    smtp_use_tls: bool = Field(True)
    email_from: Optional[str] = Field(None)
    frontend_url: str = Field("http://localhost:3000")

    # Logging settings
    log_level: str = Field("INFO")
    log_format: str = Field(
        default="text",
        description="Log format (json or text)",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def database_is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.database_url.startswith("sqlite")

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(days=self.refresh_token_expire_days)

    @property
    def password_reset_ttl(self) -> timedelta:
        return timedelta(minutes=self.password_reset_expire_minutes)

    @property
    def story_ttl(self) -> timedelta:
        return timedelta(hours=self.story_expire_hours)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Singleton settings instance
    """
    return Settings()
