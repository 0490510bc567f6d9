"""
Configuration management for nftgate.

Provides centralized, validated configuration from environment variables
with proper type checking and defaults.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.magic.link"


def _parse_bool(v) -> bool:
    if isinstance(v, str):
        return v.lower() in ("1", "true", "yes")
    return bool(v)


class AdminApiConfig(BaseSettings):
    """Admin REST API configuration."""

    secret_api_key: Optional[str] = Field(default=None, alias="ADMIN_SECRET_API_KEY")
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, alias="ADMIN_API_BASE_URL")
    timeout_seconds: float = Field(default=30.0, gt=0, alias="ADMIN_API_TIMEOUT")

    @field_validator("secret_api_key", mode="before")
    @classmethod
    def parse_secret_api_key(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    model_config = SettingsConfigDict(env_prefix="", extra="ignore", populate_by_name=True)


class ChainConfig(BaseSettings):
    """On-chain read configuration."""

    rpc_url: Optional[str] = Field(default=None, alias="WEB3_RPC_URL")
    read_timeout_seconds: float = Field(default=30.0, gt=0, alias="CHAIN_READ_TIMEOUT")

    model_config = SettingsConfigDict(env_prefix="", extra="ignore", populate_by_name=True)


class IdentityConfig(BaseSettings):
    """DID token validation configuration."""

    nbf_leeway_seconds: int = Field(default=300, ge=0, alias="DIDT_NBF_LEEWAY_SECONDS")

    model_config = SettingsConfigDict(env_prefix="", extra="ignore", populate_by_name=True)


class Settings(BaseSettings):
    """Main application settings."""

    # Environment
    environment: str = Field(default="production", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # Component configurations
    admin: AdminApiConfig = Field(default_factory=AdminApiConfig)
    chain: ChainConfig = Field(default_factory=ChainConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)

    @field_validator("debug", mode="before")
    @classmethod
    def parse_debug(cls, v):
        return _parse_bool(v)

    def model_post_init(self, __context) -> None:
        # Sub-configurations passed by the caller are kept as given
        if "admin" not in self.model_fields_set:
            self.admin = AdminApiConfig()
        if "chain" not in self.model_fields_set:
            self.chain = ChainConfig()
        if "identity" not in self.model_fields_set:
            self.identity = IdentityConfig()

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global settings
    settings = None


def validate_required_settings(for_workflow: str = "mint") -> List[str]:
    """
    Validate that required settings are present for specific workflows.

    Args:
        for_workflow: Workflow name ("mint", "ownership", or "minimal")

    Returns:
        List of missing required settings
    """
    missing = []
    try:
        config = get_settings()

        if for_workflow == "mint":
            if not config.admin.secret_api_key:
                missing.append("ADMIN_SECRET_API_KEY")

        elif for_workflow == "ownership":
            # Metadata lookup needs the admin key, balance reads need a node
            if not config.admin.secret_api_key:
                missing.append("ADMIN_SECRET_API_KEY")
            if not config.chain.rpc_url:
                missing.append("WEB3_RPC_URL")

        elif for_workflow == "minimal":
            pass

    except Exception as e:
        missing.append(f"Configuration error: {e}")

    return missing


def print_configuration_summary():
    """Print a summary of the current configuration for debugging."""
    try:
        config = get_settings()
        print("=== nftgate Configuration Summary ===")
        print(f"Environment: {config.environment}")
        print(f"Debug Mode: {config.debug}")
        print()
        print(f"Admin API: {config.admin.api_base_url}")
        print(f"Secret API Key: {'✓' if config.admin.secret_api_key else '✗'}")
        print(f"Admin API Timeout: {config.admin.timeout_seconds}s")
        print()
        print(f"RPC URL: {'✓' if config.chain.rpc_url else '✗'}")
        print(f"Chain Read Timeout: {config.chain.read_timeout_seconds}s")
        print(f"DID Token nbf Leeway: {config.identity.nbf_leeway_seconds}s")
        print("=" * 37)
    except Exception as e:
        print(f"Error loading configuration: {e}")
