"""
token-shop configuration.

Environment-based settings using Pydantic Settings.
Every value can be overridden with a TOKENSHOP_* environment variable.
"""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOKENSHOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "token-shop (in-memory ledger)"
    app_version: str = "0.1.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8085

    # Logging
    log_level: str = "INFO"
    log_dir: str = ""  # empty -> console only

    # CORS
    cors_origins: List[str] = ["*"]

    # SDK / CLI
    base_url: str = "http://127.0.0.1:8085"
    request_timeout: int = 10

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/") if isinstance(v, str) else v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
