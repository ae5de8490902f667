"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional, Union
from zoneinfo import ZoneInfo
import os

from cedoi.core.constants import (
    ACCESS_TOKEN_EXPIRE_MINUTES as DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    DEFAULT_VENUE as FORUM_VENUE,
    OTP_EXPIRE_MINUTES as DEFAULT_OTP_EXPIRE_MINUTES,
    OTP_LENGTH as DEFAULT_OTP_LENGTH,
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Storage backend: "memory" (process lifetime) or "sql" (durable)
    STORAGE_BACKEND: str = "memory"
    DATABASE_URL: Optional[str] = None

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES

    # One-time passwords
    OTP_LENGTH: int = DEFAULT_OTP_LENGTH
    OTP_EXPIRE_MINUTES: int = DEFAULT_OTP_EXPIRE_MINUTES

    # CORS - Can be a list or comma-separated string
    CORS_ORIGINS: Union[list, str] = ["*"]  # In production, specify your domain

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @field_validator('STORAGE_BACKEND')
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        backend = v.strip().lower()
        if backend not in ("memory", "sql"):
            raise ValueError("STORAGE_BACKEND must be 'memory' or 'sql'")
        return backend

    # Application
    APP_TITLE: str = "CEDOI Forum Attendance"
    APP_DESCRIPTION: str = "Attendance tracking for the CEDOI Madurai Forum"
    APP_VERSION: str = "1.0.0"

    # Forum
    TIMEZONE: str = "Asia/Kolkata"
    DEFAULT_VENUE: str = FORUM_VENUE
    SEED_DEFAULT_USERS: bool = True

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    # Database Connection Pool Configuration (ignored for SQLite)
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.TIMEZONE)

    def get_database_url(self) -> str:
        """
        Get database URL for the SQL backend.
        Priority: DATABASE_URL > default SQLite file (non-production only)
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.ENVIRONMENT != "production":
            return "sqlite:///cedoi_attendance.db"

        raise ValueError(
            "Database configuration missing. Provide DATABASE_URL when "
            "STORAGE_BACKEND=sql in production"
        )

    def validate_production_config(self) -> None:
        """Validate that production-critical settings are properly configured."""
        if self.ENVIRONMENT == "production":
            issues = []

            if self.SECRET_KEY == "your-secret-key-change-in-production":
                issues.append("SECRET_KEY must be changed from default value")

            if self.CORS_ORIGINS == ["*"]:
                issues.append("CORS_ORIGINS should be restricted to specific domains")

            if self.STORAGE_BACKEND == "memory":
                issues.append("STORAGE_BACKEND=memory loses all attendance on restart")

            if issues:
                raise ValueError(
                    "Production configuration errors:\n" +
                    "\n".join(f"  - {issue}" for issue in issues)
                )


settings = Settings()

# Validate production configuration on startup
if os.getenv("ENVIRONMENT") == "production":
    settings.validate_production_config()
