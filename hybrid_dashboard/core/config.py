"""
Application configuration using Pydantic Settings.

Supports hierarchical environment configuration:
- .env.base: Common non-secret defaults (committed to git)
- .env.{ENVIRONMENT}: Environment-specific overrides (gitignored)
- Environment variables: Highest priority
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get environment from env var, default to development
ENV = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    """Application settings with hierarchical env file support."""

    model_config = SettingsConfigDict(
        env_file=[
            ".env.base",  # Common defaults (committed)
            f".env.{ENV}",  # Environment overrides (gitignored)
        ],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "test", "production"] = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # JSON renderer for production log shipping

    # Upstream GraphQL services
    primary_api_url: str = "https://api.everybite.com/graphql"
    primary_api_token: str = ""
    analytics_api_url: str = ""  # Data warehouse Lambda endpoint (required, set ANALYTICS_API_URL)
    analytics_api_token: str = ""
    request_timeout_seconds: float = 30.0

    # Hybrid settings cache
    cache_ttl_seconds: int = 300  # 5 minutes
    cache_namespace: str = "smartmenu_hybrid"
    slow_read_threshold_ms: float = 500.0

    # Key/value persistence backing the cache
    kv_backend: Literal["memory", "file", "redis"] = "file"
    kv_file_path: str = ".cache/hybrid_dashboard.json"
    redis_url: str = "redis://localhost:6379"

    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @property
    def cache_ttl_ms(self) -> int:
        """Cache TTL in milliseconds, the unit used by persisted timestamps."""
        return self.cache_ttl_seconds * 1000

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
