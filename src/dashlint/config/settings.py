"""
Application settings using Pydantic.

Provides environment-based configuration loading with DASHLINT_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Name of the per-directory lint configuration file
    config_filename: str = ".lint"

    # Logging (diagnostics go to stderr)
    log_level: str = "WARNING"
    log_format: str = "json"

    # Reporting defaults, overridable per invocation
    strict: bool = False
    verbose: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "DASHLINT_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
