"""Service layer for the Endpoint Metadata Service."""

from .agent_client import AgentServiceClient
from .exceptions import (
    AgentNotFoundError,
    AgentServiceError,
    EndpointMetadataError,
    EndpointNotFoundError,
    InactiveAgentError,
    InvalidFilterError,
    InvalidPagingError,
    SearchBackendError,
)
from .health_metrics import HealthMetricsService
from .metadata_service import EndpointMetadataService
from .search_client import SearchClient
from .status_resolver import StatusResolver

__all__ = [
    "AgentServiceClient",
    "EndpointMetadataService",
    "HealthMetricsService",
    "SearchClient",
    "StatusResolver",
    "EndpointMetadataError",
    "InvalidPagingError",
    "InvalidFilterError",
    "EndpointNotFoundError",
    "InactiveAgentError",
    "AgentServiceError",
    "AgentNotFoundError",
    "SearchBackendError",
]
