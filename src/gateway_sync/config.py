"""Configuration management for gateway-sync."""

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthMode(str, Enum):
    """Authentication mode for Kubernetes API."""

    AUTO = "auto"
    KUBECONFIG = "kubeconfig"
    TOKEN = "token"


class ApisixRouteVersion(str, Enum):
    """ApisixRoute group version watched by the controller."""

    V2 = "apisix.apache.org/v2"
    V2BETA3 = "apisix.apache.org/v2beta3"
    V2BETA2 = "apisix.apache.org/v2beta2"


class LogLevel(str, Enum):
    """Logging level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class GatewaySyncConfig(BaseSettings):
    """Configuration for gateway-sync.

    Configuration is loaded from environment variables with GATEWAY_SYNC_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Admin API settings
    admin_base_url: str = Field(
        default="http://127.0.0.1:9180/apisix/admin",
        description="Base URL of the APISIX admin API",
    )
    admin_key: str | None = Field(
        default=None,
        description="Admin API key sent in the X-API-KEY header",
    )
    admin_timeout: float = Field(
        default=5.0,
        gt=0,
        le=120,
        description="Admin API request timeout in seconds",
    )
    admin_skip_tls_verify: bool = Field(
        default=False,
        description="Skip TLS certificate verification for the admin API",
    )
    cache_sync_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for the initial cache synchronization",
    )

    # Kubernetes authentication settings
    auth_mode: AuthMode = Field(
        default=AuthMode.AUTO,
        description="Authentication mode: auto, kubeconfig, or token",
    )
    kubeconfig_path: Path | None = Field(
        default=None,
        description="Path to kubeconfig file (defaults to ~/.kube/config)",
    )
    kubeconfig_context: str | None = Field(
        default=None,
        description="Kubeconfig context to use",
    )
    api_server: str | None = Field(
        default=None,
        description="Kubernetes API server URL (for token auth)",
    )
    api_token: str | None = Field(
        default=None,
        description="Kubernetes API token (for token auth)",
    )
    apisix_route_version: ApisixRouteVersion = Field(
        default=ApisixRouteVersion.V2,
        description="ApisixRoute group version to read",
    )

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )

    @field_validator("admin_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the admin base URL so collection paths join cleanly."""
        return v.rstrip("/")

    @field_validator("kubeconfig_path", mode="before")
    @classmethod
    def resolve_kubeconfig_path(cls, v: str | Path | None) -> Path | None:
        """Resolve kubeconfig path, defaulting to standard location."""
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    @property
    def effective_kubeconfig_path(self) -> Path:
        """Get the effective kubeconfig path, with default."""
        if self.kubeconfig_path:
            return self.kubeconfig_path
        env_path = os.environ.get("KUBECONFIG")
        if env_path:
            return Path(env_path).expanduser().resolve()
        return Path.home() / ".kube" / "config"

    def validate_auth_config(self) -> list[str]:
        """Validate authentication configuration and return any warnings."""
        warnings = []

        if self.auth_mode == AuthMode.TOKEN:
            if not self.api_server:
                raise ValueError("api_server is required when auth_mode is 'token'")
            if not self.api_token:
                raise ValueError("api_token is required when auth_mode is 'token'")

        if self.auth_mode == AuthMode.KUBECONFIG and not self.effective_kubeconfig_path.exists():
            raise ValueError(f"Kubeconfig file not found: {self.effective_kubeconfig_path}")

        if self.auth_mode == AuthMode.AUTO:
            if Path("/var/run/secrets/kubernetes.io/serviceaccount/token").exists():
                warnings.append("Running in-cluster, will use service account")
            elif not self.effective_kubeconfig_path.exists():
                warnings.append(
                    f"No kubeconfig found at {self.effective_kubeconfig_path}, "
                    "will attempt in-cluster auth"
                )

        if self.admin_skip_tls_verify:
            warnings.append("TLS verification disabled for the admin API")

        return warnings


# Global configuration instance
_config: GatewaySyncConfig | None = None


def get_config() -> GatewaySyncConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = GatewaySyncConfig()
    return _config


def configure(**kwargs: Any) -> GatewaySyncConfig:
    """Configure the global settings.

    This should be called before get_config() if you want to override defaults.
    """
    global _config
    _config = GatewaySyncConfig(**kwargs)
    return _config
