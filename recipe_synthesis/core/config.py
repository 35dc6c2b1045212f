"""
Core configuration module for the Recipe Synthesis service.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the RECIPE_SYNTH_ prefix.

Reference:
- Pydantic BaseSettings pattern
- Provider quotas: Gemini free tier, Spoonacular daily points, YouTube Data API units
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All fields use the RECIPE_SYNTH_ prefix for environment variables.
    Example: RECIPE_SYNTH_MAX_DAILY_PRIMARY_CALLS=100
    """

    # =========================================================================
    # Service Configuration
    # =========================================================================
    service_name: str = Field(
        default="recipe-synthesis",
        description="Name of the service for logging and identification",
    )
    host: str = Field(
        default="0.0.0.0",
        description="Interface the service binds to",
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port the service listens on",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for structured logging",
    )
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Allowed CORS origins outside development (JSON list)",
    )

    # =========================================================================
    # Redis / Cache Configuration
    # =========================================================================
    redis_url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL for the recipe cache and breaker flags",
    )
    cache_operation_timeout_seconds: float = Field(
        default=3.0,
        gt=0.0,
        le=60.0,
        description="Timeout for cache get/set/delete operations",
    )
    cache_liveness_timeout_seconds: float = Field(
        default=2.0,
        gt=0.0,
        le=60.0,
        description="Timeout for cache liveness (PING) checks",
    )
    enable_caching: bool = Field(
        default=True,
        description="Check and populate the recipe cache",
    )
    recipe_cache_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        ge=1,
        description="TTL for cached recipes",
    )

    # =========================================================================
    # Quota / Breaker Configuration
    # =========================================================================
    limit_primary_calls: bool = Field(
        default=True,
        description="Enforce the daily ceiling on generative provider calls",
    )
    max_daily_primary_calls: int = Field(
        default=50,
        ge=0,
        description="Maximum generative provider calls per calendar day",
    )
    breaker_ttl_seconds: int = Field(
        default=6 * 60 * 60,
        ge=1,
        description="How long a provider stays disabled after a quota failure",
    )

    # =========================================================================
    # Provider API Keys
    # SecretStr masks values in logs/repr, use .get_secret_value() to access
    # =========================================================================
    gemini_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Google Generative Language API key",
    )
    spoonacular_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Spoonacular recipe API key",
    )
    youtube_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="YouTube Data API key",
    )

    # =========================================================================
    # Provider Endpoints and Timeouts
    # =========================================================================
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini REST API",
    )
    gemini_model: str = Field(
        default="gemini-1.5-pro",
        description="Model used for the first two generation attempts",
    )
    gemini_alternate_model: str = Field(
        default="gemini-1.5-flash",
        description="Model used for the final generation attempt",
    )
    gemini_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=300.0,
        description="Timeout for one generative provider attempt",
    )
    spoonacular_api_base: str = Field(
        default="https://api.spoonacular.com/recipes",
        description="Base URL of the Spoonacular recipes API",
    )
    spoonacular_timeout_seconds: float = Field(
        default=15.0,
        gt=0.0,
        le=300.0,
        description="Timeout for one structured-database attempt",
    )
    youtube_api_base: str = Field(
        default="https://www.googleapis.com/youtube/v3",
        description="Base URL of the YouTube Data API",
    )
    youtube_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=300.0,
        description="Timeout for a media lookup",
    )

    model_config = {
        "env_prefix": "RECIPE_SYNTH_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        """Validate Redis URL format."""
        if not v.startswith(("redis://", "rediss://")):
            raise ValueError("Redis URL must start with redis:// or rediss://")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return level


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses functools.lru_cache to ensure only one Settings instance is created.

    Returns:
        Settings: The application settings instance.
    """
    return Settings()
