"""
kassa/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, secrets, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="kassa_kilat",
        description="MongoDB database name"
    )

    # Store
    STORE_NAME: str = Field(
        default="Kassa Kilat",
        description="Display name used in API metadata"
    )
    STORE_SYMBOL: str = Field(
        default="店",
        description="Symbol printed in the text report header"
    )
    REPORT_TIMEZONE: str = Field(
        default="Asia/Jakarta",
        description="Timezone used for report timestamps and 'today' filters"
    )

    # Authentication
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24,
        description="Bearer token lifetime in minutes"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Signing algorithm for bearer tokens"
    )
    SUPERADMIN_EMAILS: List[str] = Field(
        default=[],
        description="E-mails that receive the superadmin role on registration"
    )

    # Uploads
    MAX_AVATAR_BYTES: int = Field(
        default=2 * 1024 * 1024,
        description="Maximum profile picture size in bytes"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Security
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Secret used to sign bearer tokens"
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str, info: ValidationInfo) -> str:
        """Ensure secret key is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v

    @field_validator("SUPERADMIN_EMAILS")
    @classmethod
    def normalize_superadmin_emails(cls, v: List[str]) -> List[str]:
        return [email.strip().lower() for email in v if email.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    try:
        ZoneInfo(settings.REPORT_TIMEZONE)
    except ZoneInfoNotFoundError:
        errors.append(f"REPORT_TIMEZONE '{settings.REPORT_TIMEZONE}' is not a known timezone")

    if settings.ACCESS_TOKEN_EXPIRE_MINUTES <= 0:
        errors.append("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")

    if settings.MAX_AVATAR_BYTES <= 0:
        errors.append("MAX_AVATAR_BYTES must be positive")

    # Production-specific validations
    if settings.is_production:
        if "*" in settings.CORS_ORIGINS:
            errors.append("CORS_ORIGINS must not contain '*' in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
