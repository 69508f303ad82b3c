"""
Shared configuration management for the permissions engine.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PermissionsSettings(BaseSettings):
    """Settings read from ``PERMISSIONS_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="PERMISSIONS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    service_name: str = Field(default="permissions")

    # Rule source; url wins over file when both are set
    rules_url: Optional[str] = Field(default=None)
    rules_file: Optional[str] = Field(default=None)
    rules_timeout_seconds: float = Field(default=10.0, gt=0)
    rules_auth_token: Optional[str] = Field(default=None)

    # Observability
    enable_metrics: bool = Field(default=True)


def get_settings(**overrides) -> PermissionsSettings:
    """Load settings, applying explicit overrides on top of the environment."""
    return PermissionsSettings(**overrides)
