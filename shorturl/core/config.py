"""Application configuration module.

This module contains settings for the short URL service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "Short URL Service"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Numeric short URLs with redirect"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Persistent store
    DATABASE_URL: str = "sqlite+aiosqlite:///./shorturl.db"
    DB_POOL_SIZE: int = 20
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False

    # URL validation, checks run in the listed order
    URL_VALIDATORS: Union[List[str], str] = ["pattern", "dns"]
    URL_MAX_LENGTH: int = 2048
    DNS_TIMEOUT: float = 5.0  # seconds

    # Landing page and static assets (relative to BASE_DIR unless absolute)
    STATIC_DIR: str = "public"
    VIEWS_DIR: str = "views"

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}"
    LOG_JSON: bool = True
    LOG_FILE_ENABLED: bool = True
    REQUEST_LOGGING_ENABLED: bool = True

    # Validators
    @field_validator("CORS_ORIGINS")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("URL_VALIDATORS")
    def validate_check_names(cls, v: Union[List[str], str]) -> List[str]:
        """Accept "pattern,dns" style strings and lower-case the check names."""
        if isinstance(v, str):
            v = v.split(",")
        return [name.strip().lower() for name in v if name.strip()]

    @field_validator("DNS_TIMEOUT")
    def validate_dns_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DNS_TIMEOUT must be positive")
        return v

    def resolve_path(self, path: str) -> Path:
        """Resolve a configured directory against the project root."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return BASE_DIR / candidate

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# Create a singleton instance of the settings
settings = Settings()
