"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Supports multiple environments (production, staging, dev)
- PORT can be overridden from the environment like any other field
- SECRET_KEY signs the session cookie and must be set outside development
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


class EnvSettingsOptions(Enum):
    """Environment options for deployment."""
    production = "production"
    staging = "staging"
    development = "dev"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Configuration
    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Environment setting (production, staging, dev)"
    )

    # Server Configuration
    HOST: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )
    PORT: int = Field(
        default=8080,
        description="Port the HTTP server listens on"
    )
    BASE_URL: str = Field(
        default="http://localhost:8080",
        description="Base URL for displaying short URLs"
    )

    # Session Configuration
    SECRET_KEY: str = Field(
        default="tinyapp-development-secret",
        description="Key used to sign the session cookie"
    )
    SESSION_MAX_AGE: int = Field(
        default=900,
        description="Session cookie lifetime in seconds (15 minutes)"
    )

    # Short Code Configuration
    SHORT_CODE_LENGTH: int = Field(
        default=6,
        description="Fixed length for generated short codes"
    )
    MAX_COLLISION_RETRIES: int = Field(
        default=10,
        description="Maximum number of draws before giving up on a free short code"
    )

    # Password Hashing
    BCRYPT_ROUNDS: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor (log2 of the number of rounds)"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = Field(
        default=True,
        description="Enable per-IP rate limits on login, register, create and redirect (read once per process)"
    )
    TRUST_FORWARDED_FOR: bool = Field(
        default=False,
        description="Take the client IP from X-Forwarded-For (only behind a trusted proxy)"
    )

    # Demo Data
    SEED_DEMO_DATA: bool = Field(
        default=False,
        description="Register a demo user with sample links on startup"
    )
    DEMO_EMAIL: str = Field(
        default="demo@example.com",
        description="Email of the seeded demo user"
    )
    DEMO_PASSWORD: str = Field(
        default="demo",
        description="Password of the seeded demo user"
    )


settings = Settings()
