"""
Configuration management for factual-query using pydantic-settings.

Provides typed configuration with .env file support and defaults for the
handful of settings the query layer and its CLI read.

Usage:
    from factual_query.config import settings

    base_url = settings.FACTUAL_API_BASE_URL
    table = settings.FACTUAL_DEFAULT_TABLE

    # To change settings, modify .env file or set environment variables
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    factual-query configuration.

    Settings are loaded in this order (later sources override earlier):
    1. Default values
    2. .env file
    3. Environment variables (highest priority)
    """

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    FACTUAL_QUERY_LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    LOG_FORMAT: str = Field(
        default="text",
        description="Log format: 'text' for human-readable, 'json' for structured",
    )

    # =========================================================================
    # Read API Configuration
    # =========================================================================

    FACTUAL_API_BASE_URL: str = Field(
        default="https://api.v3.factual.com",
        description="Base URL that read paths are appended to",
    )

    FACTUAL_DEFAULT_TABLE: str = Field(
        default="places",
        description="Table queried when no table is given explicitly",
    )

    # =========================================================================
    # Pydantic Settings Configuration
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance - loaded once on import
settings = Settings()


def reload_settings() -> Settings:
    """
    Reload settings from environment and .env file.

    Returns:
        New Settings instance with current environment values
    """
    return Settings()


__all__ = ["settings", "reload_settings", "Settings"]
