"""Data models for the Endpoint Metadata Service.

This module contains all Pydantic models used throughout the application,
ensuring strict type safety and runtime validation."""

# Import all enums
from .enums import HostStatus, MetadataQueryStrategyVersions

# Import host models
from .host import HostInfo, HostMetadataRecord, HostResultList

# Import agent service models
from .agent import Agent, AgentPage

# Import request models
from .requests import HostListFilters, HostListRequest, PagingProperty, PagingRequest

# Import search models
from .search import SearchResult

__all__ = [
    # Enums
    "HostStatus",
    "MetadataQueryStrategyVersions",
    # Host models
    "HostMetadataRecord",
    "HostInfo",
    "HostResultList",
    # Agent models
    "Agent",
    "AgentPage",
    # Request models
    "PagingProperty",
    "HostListFilters",
    "HostListRequest",
    "PagingRequest",
    # Search models
    "SearchResult",
]
