"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (and an optional
.env file) with validation, type coercion, and sensible defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ITADConfig(BaseSettings):
    """IsThereAnyDeal API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ITAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr = Field(
        default=...,
        description="IsThereAnyDeal API key from https://isthereanydeal.com/apps/my/",
    )
    base_url: str = Field(
        default="https://api.isthereanydeal.com",
        description="Base URL for the IsThereAnyDeal API",
    )
    country: str = Field(
        default="CA",
        description="Two-letter country code used for price lookups",
    )
    lookup_interval_seconds: float = Field(
        default=0.1,
        ge=0.0,
        le=60.0,
        description="Minimum delay between consecutive game lookups",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=5,
        le=120,
        description="HTTP request timeout in seconds",
    )

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        """Normalize and validate the country code."""
        v = v.strip().upper()
        if len(v) != 2 or not v.isalpha():
            raise ValueError(f"Invalid country code: {v}")
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class CacheConfig(BaseSettings):
    """Catalog and snapshot locations."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    catalog_path: Path = Field(
        default=Path("public/gamelist.json"),
        description="Canonical game catalog (JSON array of {steamID, ...})",
    )
    snapshot_path: Path = Field(
        default=Path("public/priceData.json"),
        description="Persisted price snapshot, read at start and replaced at end",
    )
    retain_delisted: bool = Field(
        default=False,
        description="Keep cached games whose Steam ID is no longer in the catalog",
    )


class RetryConfig(BaseSettings):
    """Retry behavior configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of retry attempts",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        ge=0.01,
        le=30.0,
        description="Base delay between retries (exponential backoff)",
    )
    max_delay_seconds: float = Field(
        default=60.0,
        ge=0.01,
        le=300.0,
        description="Maximum delay between retries",
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.5,
        le=4.0,
        description="Base for exponential backoff calculation",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    itad: ITADConfig = Field(default_factory=ITADConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
