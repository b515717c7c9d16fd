"""Configuration classes for the Endpoint Metadata Service.

This module contains all configuration classes organized by domain.
Configuration is loaded from environment variables and .env files.
"""

from typing import Any, List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def str_to_bool(value: Any) -> bool:
    """Convert various string representations to boolean values.

    This function provides consistent boolean conversion from environment variables
    and other string sources. It can be used as a field validator for Pydantic models.

    Args:
        value: The value to convert. Can be bool, str, int, or any other type.

    Returns:
        bool: The converted boolean value.

    Examples:
        >>> str_to_bool("true")
        True
        >>> str_to_bool("0")
        False
        >>> str_to_bool("yes")
        True
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "on", "enabled")
    if isinstance(value, int):
        return bool(value)
    return bool(value)


def _validate_service_url(value: str, name: str) -> str:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"{name} must start with http:// or https://")
    return value.rstrip("/")


class ServerConfig(BaseSettings):
    """Server configuration settings."""

    # Application metadata
    app_name: str = "Endpoint Metadata Service"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server configuration
    server_port: int = Field(default=8081, alias="SERVER_PORT")
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])


class SearchConfig(BaseSettings):
    """Search backend configuration settings."""

    search_url: str = Field(default="http://localhost:9200", alias="SEARCH_URL")
    search_api_key: Optional[str] = Field(default=None, alias="SEARCH_API_KEY")
    metadata_index: str = Field(
        default="metrics-endpoint.metadata-*", alias="METADATA_INDEX"
    )
    search_timeout: float = Field(default=30.0, gt=0, alias="SEARCH_TIMEOUT")
    search_verify_tls: bool = Field(default=True, alias="SEARCH_VERIFY_TLS")

    @field_validator("search_verify_tls", mode="before")
    @classmethod
    def validate_search_verify_tls(cls, v) -> bool:
        """Convert string boolean values to actual boolean."""
        return str_to_bool(v)

    @field_validator("search_url")
    @classmethod
    def validate_search_url(cls, v: str) -> str:
        """Ensure the search URL is properly formatted."""
        return _validate_service_url(v, "search_url")


class AgentServiceConfig(BaseSettings):
    """Agent management (Fleet) service configuration settings."""

    agent_service_url: str = Field(
        default="http://localhost:5601", alias="AGENT_SERVICE_URL"
    )
    agent_service_api_key: str = Field(default="", alias="AGENT_SERVICE_API_KEY")
    agent_service_timeout: float = Field(
        default=10.0, gt=0, alias="AGENT_SERVICE_TIMEOUT"
    )
    unenrolled_agents_page_size: int = Field(
        default=1000, ge=1, alias="UNENROLLED_AGENTS_PAGE_SIZE"
    )
    api_key_header: str = "Authorization"

    @field_validator("agent_service_url")
    @classmethod
    def validate_agent_service_url(cls, v: str) -> str:
        """Ensure the agent service URL is properly formatted."""
        return _validate_service_url(v, "agent_service_url")


class MetadataConfig(BaseSettings):
    """Host metadata listing configuration settings."""

    default_page_size: int = Field(default=10, ge=1, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=10000, ge=1, alias="MAX_PAGE_SIZE")
    status_lookup_concurrency: int = Field(
        default=10, ge=1, alias="STATUS_LOOKUP_CONCURRENCY"
    )
    executor_workers: int = Field(default=8, ge=1, alias="EXECUTOR_WORKERS")


class MonitoringConfig(BaseSettings):
    """Monitoring configuration settings."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    @field_validator("log_json", mode="before")
    @classmethod
    def validate_log_json(cls, v) -> bool:
        """Convert string boolean values to actual boolean."""
        return str_to_bool(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()


class ApplicationConfig(
    ServerConfig,
    SearchConfig,
    AgentServiceConfig,
    MetadataConfig,
    MonitoringConfig,
    BaseSettings
):
    """Main application configuration that combines all configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )
