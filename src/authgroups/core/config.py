"""Configuration management for AuthGroups.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Table names live under the nested
``table`` section so that ``table.groups`` maps to ``AUTHGROUPS_TABLE__GROUPS``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TableSettings(BaseModel):
    """Backing table names for the group subsystem.

    Names are lower-cased on load.
    """

    groups: str = "groups"
    users_groups: str = "users_groups"
    users: str = "users"
    users_metadata: str = "users_metadata"
    users_suspended: str = "users_suspended"

    @field_validator("*")
    @classmethod
    def normalize_table_name(cls, v: str) -> str:
        """Lower-case and strip table names, rejecting empty values."""
        name = v.strip().lower()
        if not name:
            raise ValueError("Table name must not be empty")
        return name


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTHGROUPS_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "AuthGroups"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/authgroups.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Table names
    table: TableSettings = TableSettings()

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once; call ``get_settings.cache_clear()`` to reload.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
