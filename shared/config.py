"""
Shared configuration management for the native auth service.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="NATIVE_AUTH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Block timestamp API
    api_url: str = "https://api.vibechain.ai"
    request_timeout: float = 10.0
    oracle_failure_threshold: int = 5
    oracle_recovery_timeout: float = 30.0

    # Token validation
    max_expiry_seconds: int = 86400
    accepted_origins: List[str] = Field(default_factory=lambda: ["*"])
    skip_legacy_validation: bool = False
    validate_impersonate_url: Optional[str] = None
    # accounts of other chains are rejected
    address_hrp: Optional[str] = "vibe"

    # Browser access; None means "*" in local env and no origins elsewhere
    cors_origins: Optional[List[str]] = None

    # External cache; in-process cache is used when unset
    redis_url: Optional[str] = None


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
