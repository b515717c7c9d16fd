"""Enumeration types for Endpoint Metadata Service models."""

from enum import Enum


class HostStatus(str, Enum):
    """Liveness status reported for a host."""

    ONLINE = "online"
    OFFLINE = "offline"
    ERROR = "error"
    UNENROLLING = "unenrolling"


class MetadataQueryStrategyVersions(str, Enum):
    """Query construction revisions a host list response can come from."""

    VERSION_1 = "v1"
