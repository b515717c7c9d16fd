"""Host metadata models for the Endpoint Metadata Service."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import HostStatus, MetadataQueryStrategyVersions


def _get_path(document: Dict[str, Any], path: str) -> Optional[Any]:
    """Read a dotted path out of a nested document."""
    value: Any = document
    for key in path.split("."):
        if not isinstance(value, dict) or key not in value:
            return None
        value = value[key]
    return value


class HostMetadataRecord(BaseModel):
    """One metadata document returned by the search backend."""

    id: str = Field(..., description="Search document identifier")
    host_id: Optional[str] = Field(default=None, description="host.id of the document")
    agent_id: Optional[str] = Field(
        default=None, description="elastic.agent.id of the document"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Raw metadata document"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_hit(cls, hit: Dict[str, Any]) -> "HostMetadataRecord":
        """Build a record from a raw search hit.

        Collapsed hits carry the latest document under
        ``inner_hits.most_recent``; plain hits carry it in ``_source``.
        """
        inner = (
            hit.get("inner_hits", {})
            .get("most_recent", {})
            .get("hits", {})
            .get("hits", [])
        )
        source_hit = inner[0] if inner else hit
        source = source_hit.get("_source", {}) or {}
        return cls(
            id=str(source_hit.get("_id", hit.get("_id", ""))),
            host_id=_get_path(source, "host.id"),
            agent_id=_get_path(source, "elastic.agent.id"),
            metadata=source,
        )


class HostInfo(BaseModel):
    """A host metadata document enriched with its liveness status."""

    metadata: Dict[str, Any] = Field(..., description="Latest metadata document")
    host_status: HostStatus = Field(..., description="Resolved host status")


class HostResultList(BaseModel):
    """Paged list of hosts."""

    hosts: List[HostInfo] = Field(default_factory=list, description="Hosts on this page")
    total: int = Field(..., ge=0, description="Number of hosts matching the query")
    request_page_index: int = Field(
        ..., ge=0, description="Backend offset the page was served from"
    )
    request_page_size: int = Field(..., ge=1, description="Effective page size")
    query_strategy_version: MetadataQueryStrategyVersions = Field(
        ..., description="Query construction revision"
    )
