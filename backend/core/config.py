"""
Centralized configuration for the stock checker service.

All environment variables and settings should be defined here
to avoid duplication across modules.
"""
import os
from functools import lru_cache

from stockcheck.config import DEFAULT_CONFIG_PATH


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # CORS - comma-separated list of allowed origins
        self.ALLOWED_ORIGINS: list = os.environ.get(
            "ALLOWED_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173"
        ).split(",")

        # Path to the declarative JSON config (source + resource names)
        self.CONFIG_PATH: str = os.environ.get("STOCKCHECK_CONFIG", str(DEFAULT_CONFIG_PATH))

        # When set, exports are read from this directory instead of the configured source
        self.SOURCE_DIR: str = os.environ.get("STOCKCHECK_SOURCE_DIR", "")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
