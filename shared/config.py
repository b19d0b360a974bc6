"""
Shared configuration management for the Galaxy gateway.
"""

from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GALAXY_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Backend RPC service
    backend_rpc_url: str = Field(default="http://localhost:9090")
    backend_timeout_seconds: float = Field(default=10.0, gt=0)

    # Security
    token_symmetric_key: Optional[SecretStr] = Field(default=None)
    cors_allow_origins: List[str] = Field(default_factory=list)

    @field_validator("token_symmetric_key")
    @classmethod
    def _check_key_length(cls, value: Optional[SecretStr]) -> Optional[SecretStr]:
        if value is not None and len(value.get_secret_value()) != 32:
            raise ValueError("token_symmetric_key must be exactly 32 characters")
        return value


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
