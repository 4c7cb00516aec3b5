"""
Configuration management for the cluster cache.
Handles environment variables and cache group settings.
"""

import json
from typing import Any, Dict

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Cluster Cache"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Cache groups
    CACHE_DEFAULT_GROUP: str = "default"
    CACHE_DEFAULT_EXPIRE: int = 3600  # seconds
    CACHE_GROUPS: Dict[str, Dict[str, Any]] = {
        "default": {
            "driver": "redis",
            "servers": [
                {"host": "localhost", "port": 6379},
            ],
        },
    }

    @field_validator("CACHE_GROUPS", mode="before")
    @classmethod
    def parse_cache_groups(cls, v):
        """Parse cache groups from a JSON string or dict."""
        if isinstance(v, str):
            return json.loads(v)
        return v

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of {allowed_envs}")
        return v

    @field_validator("CACHE_DEFAULT_EXPIRE")
    @classmethod
    def validate_default_expire(cls, v):
        """Lifetimes are whole seconds and must be positive."""
        if v <= 0:
            raise ValueError("CACHE_DEFAULT_EXPIRE must be a positive number of seconds")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Create global settings instance
settings = Settings()


def is_production() -> bool:
    """Check if running in production environment."""
    return settings.ENVIRONMENT == "production"
