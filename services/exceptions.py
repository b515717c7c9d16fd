"""Errors raised by the metadata service layer."""

from typing import Optional


class EndpointMetadataError(Exception):
    """Base class for all service errors."""


class InvalidPagingError(EndpointMetadataError):
    """Page index or page size out of range."""


class InvalidFilterError(EndpointMetadataError):
    """The KQL filter expression could not be parsed."""

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)
        self.position = position


class EndpointNotFoundError(EndpointMetadataError):
    """No metadata document exists for the requested host."""

    def __init__(self, host_id: str) -> None:
        super().__init__(f"Endpoint {host_id} not found")
        self.host_id = host_id


class InactiveAgentError(EndpointMetadataError):
    """The host's agent exists but has been unenrolled."""

    def __init__(self, agent_id: str) -> None:
        super().__init__("the requested endpoint is unenrolled")
        self.agent_id = agent_id


class AgentServiceError(EndpointMetadataError):
    """The agent management service failed to answer."""


class AgentNotFoundError(AgentServiceError):
    """The agent management service has no record of the agent."""

    def __init__(self, agent_id: str) -> None:
        super().__init__(f"Agent {agent_id} not found")
        self.agent_id = agent_id


class SearchBackendError(EndpointMetadataError):
    """The search backend failed to answer."""
