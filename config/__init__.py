"""Configuration management for the Endpoint Metadata Service.

This module handles all configuration loading and validation using Pydantic BaseSettings.
Configuration is loaded from environment variables and .env files.
"""

from .config import (
    AgentServiceConfig,
    ApplicationConfig,
    MetadataConfig,
    MonitoringConfig,
    SearchConfig,
    ServerConfig,
    str_to_bool,
)


def load_config() -> ApplicationConfig:
    """Load and validate application configuration."""
    return ApplicationConfig()


__all__ = [
    "ApplicationConfig",
    "ServerConfig",
    "SearchConfig",
    "AgentServiceConfig",
    "MetadataConfig",
    "MonitoringConfig",
    "load_config",
    "str_to_bool",
]
