"""Inbound request schemas for the metadata routes."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import HostStatus


class PagingProperty(BaseModel):
    """One entry of ``paging_properties``; carries either a size or an index."""

    page_size: Optional[int] = Field(default=None, description="Requested page size")
    page_index: Optional[int] = Field(default=None, description="Requested page index")

    model_config = ConfigDict(extra="forbid")


class HostListFilters(BaseModel):
    """User supplied filters for the host list."""

    kql: Optional[str] = Field(default=None, description="KQL filter expression")
    host_status: List[HostStatus] = Field(
        default_factory=list, description="Only return hosts in these states"
    )

    model_config = ConfigDict(extra="forbid")


class HostListRequest(BaseModel):
    """Body of a host list request."""

    paging_properties: Optional[List[PagingProperty]] = Field(
        default=None, description="Paging entries, e.g. [{page_size}, {page_index}]"
    )
    filters: Optional[HostListFilters] = Field(default=None)

    model_config = ConfigDict(extra="forbid")


class PagingRequest(BaseModel):
    """Resolved paging parameters."""

    page_index: int = 0
    page_size: int = 10

    model_config = ConfigDict(frozen=True)
