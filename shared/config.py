"""
Shared configuration management for the Field Management service.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="FIELDS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Persistence
    database_url: str = Field(
        default="sqlite+aiosqlite:///./fields.db",
        description="SQLAlchemy URL; use postgresql+asyncpg://... in deployed environments."
    )
    database_echo: bool = Field(default=False)
    database_pool_size: int = Field(default=5, ge=1)

    # CORS
    cors_origins: list[str] = Field(default_factory=list)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
