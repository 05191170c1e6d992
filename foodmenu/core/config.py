"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Two switches drive how the application is wired:
    - ENV_MODE: development uses the mock notifier (nothing leaves the box),
      staging/production talk to the real Telegram Bot API.
    - STORAGE_BACKEND: selects the data-access layer (SQL database or a
      single JSON file on disk).

Usage:
    from foodmenu.core.config import get_settings

    settings = get_settings()
    if settings.storage_backend == StorageBackend.JSON:
        ...

Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing, notifications are only logged
        PRODUCTION: Live environment, notifications go to Telegram
        STAGING: Pre-production, real Telegram with a test chat
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class StorageBackend(str, Enum):
    """Backing stores the data-access layer can run against."""
    SQL = "sql"
    JSON = "json"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Telegram bot credentials are NOT configured here: they are site settings
    edited from the admin back-office and stored with the rest of the data.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Food Menu Storefront",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=3000,
        description="API server port"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # ==========================================================================
    # STORAGE
    # ==========================================================================

    storage_backend: StorageBackend = Field(
        default=StorageBackend.SQL,
        description="Data-access backend: sql or json"
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/foodmenu.db",
        description="SQLAlchemy async connection URL (sql backend)"
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )
    json_db_path: str = Field(
        default="data/db.json",
        description="Path of the JSON database file (json backend)"
    )
    json_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for the JSON database lock"
    )
    seed_demo_data: bool = Field(
        default=True,
        description="Seed default restaurants, menu and admin into an empty store"
    )

    # ==========================================================================
    # REDIS / CELERY
    # ==========================================================================

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )
    excel_export_enabled: bool = Field(
        default=True,
        description="Queue an Excel ledger export for every new order"
    )

    # ==========================================================================
    # ADMIN
    # ==========================================================================

    admin_session_ttl_minutes: int = Field(
        default=480,
        description="Lifetime of an admin session token"
    )
    default_admin_username: str = Field(
        default="admin",
        description="Username seeded into an empty store"
    )
    default_admin_password: str = Field(
        default="admin",
        description="Password seeded into an empty store (stored hashed)"
    )

    # ==========================================================================
    # TELEGRAM
    # ==========================================================================

    telegram_api_base: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL"
    )
    telegram_timeout_seconds: float = Field(
        default=6.0,
        description="Timeout for a single sendMessage call"
    )
    currency_symbol: str = Field(
        default="₽",
        description="Currency symbol used in notification text"
    )

    # ==========================================================================
    # FILE STORAGE
    # ==========================================================================

    data_directory: str = Field(
        default="data",
        description="Directory for data files"
    )
    excel_filename: str = Field(
        default="orders.xlsx",
        description="Excel ledger filename"
    )
    excel_lock_timeout: int = Field(
        default=30,
        description="Seconds to wait for file lock"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("storage_backend", mode="before")
    @classmethod
    def validate_storage_backend(cls, v: str) -> StorageBackend:
        if isinstance(v, StorageBackend):
            return v
        try:
            return StorageBackend(v.lower())
        except ValueError:
            valid = [e.value for e in StorageBackend]
            raise ValueError(f"Invalid storage_backend. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def use_real_services(self) -> bool:
        """Check if real external services should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def excel_path(self) -> Path:
        return Path(self.data_directory) / self.excel_filename

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Check for settings that should never keep their defaults in production.

        Returns:
            List of offending configuration keys (empty if all good)
        """
        problems = []

        if self.is_production:
            if self.default_admin_password == "admin":
                problems.append("DEFAULT_ADMIN_PASSWORD")
            if "*" in self.cors_origins_list:
                problems.append("CORS_ORIGINS")

        return problems


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded only once per process; call
    ``get_settings.cache_clear()`` after changing the environment.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("filelock").setLevel(logging.WARNING)

    return logging.getLogger("foodmenu")
