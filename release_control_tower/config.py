"""
Configuration management for Release Control Tower.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Release Control Tower")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_workers: int = Field(default=1)

    # Database
    database_url: str = Field(default="sqlite:///./release_control_tower.db")
    db_pool_size: int = Field(
        default=5, description="Connections kept idle in the pool."
    )
    db_max_overflow: int = Field(
        default=20,
        description="Extra connections above db_pool_size (25 open in total by default).",
    )
    db_pool_recycle: int = Field(default=3600)
    db_auto_create: bool = Field(
        default=True,
        description="Create missing tables on startup. Production deployments run Alembic instead.",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # Operator tools
    release_api_url: str = Field(default="http://localhost:8000")
    release_api_timeout: float = Field(default=30.0)
    release_api_token: Optional[str] = Field(default=None)


@lru_cache
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
