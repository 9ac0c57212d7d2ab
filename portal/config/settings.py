"""
Environment configuration for the reservation portal.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from typing import List, Optional
from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application configuration
    APP_NAME: str = Field(default="Reservation Portal", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="v1", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Database configuration
    DATABASE_URL: str = "sqlite:///./reservations.db"
    DATABASE_ECHO: bool = False

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None
    ENABLE_STRUCTURED_LOGGING: bool = False

    # Comma separated roles allowed to approve/reject reservations
    REVIEWER_ROLES: str = "super_admin,reviewer"

    # Reservation workflow defaults
    DEFAULT_APPROVAL_COMMENT: str = "Reservation approved"
    DEFAULT_CANCELLATION_REASON: str = "Cancelled by user"
    AUDITORIUM_LOCATION_LABEL: str = "Auditório Steffi e Max Perlaman"
    ROOM_LOCATION_PLACEHOLDER: str = "To be defined"

    # Notification delivery
    NOTIFICATION_CHANNEL: str = "in_app"
    NOTIFICATION_TIMEOUT_SECONDS: float = 5.0

    # Email configuration
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = Field(default=None, alias="SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TLS: bool = True
    EMAIL_FROM_ADDRESS: Optional[str] = Field(default=None, alias="FROM_EMAIL")

    @field_validator('NOTIFICATION_CHANNEL')
    @classmethod
    def validate_notification_channel(cls, v: str) -> str:
        if v not in ("in_app", "email"):
            raise ValueError(f"Unsupported notification channel: {v}")
        return v

    @property
    def reviewer_roles(self) -> List[str]:
        """Parse REVIEWER_ROLES into a list"""
        return [role.strip() for role in self.REVIEWER_ROLES.split(",") if role.strip()]

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
