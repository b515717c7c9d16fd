"""Host metadata list and detail assembly.

Builds the search for a page of hosts, runs it, resolves every host's status
from the agent service and returns the response envelopes.
"""

import asyncio
from typing import List, Optional, Protocol

from config import ApplicationConfig
from models import (
    HostInfo,
    HostListRequest,
    HostMetadataRecord,
    HostResultList,
    HostStatus,
    MetadataQueryStrategyVersions,
    SearchResult,
)
from utils import create_contextual_logger
from .agent_client import AgentServiceClient
from .exceptions import EndpointNotFoundError
from .paging import resolve_paging, to_offset_limit
from .query_builder import build_host_request, build_list_request
from .status_resolver import StatusResolver


class SearchBackend(Protocol):
    async def search_request(self, request: dict) -> SearchResult: ...


class EndpointMetadataService:
    """Read path for host metadata."""

    query_strategy_version = MetadataQueryStrategyVersions.VERSION_1

    def __init__(
        self,
        config: ApplicationConfig,
        search_client: SearchBackend,
        agent_client: AgentServiceClient,
    ) -> None:
        self.config = config
        self.search_client = search_client
        self.agent_client = agent_client
        self.status_resolver = StatusResolver(agent_client)
        self.logger = create_contextual_logger(__name__, service="endpoint_metadata")

    async def list_hosts(self, request: Optional[HostListRequest] = None) -> HostResultList:
        """One page of current hosts with their statuses."""
        request = request or HostListRequest()
        paging = resolve_paging(
            request.paging_properties,
            default_page_size=self.config.default_page_size,
            max_page_size=self.config.max_page_size,
        )
        offset, limit = to_offset_limit(paging)
        kql = request.filters.kql if request.filters else None
        statuses = request.filters.host_status if request.filters else []

        status_agent_ids: List[str] = []
        if statuses:
            status_agent_ids = await self.agent_client.find_agent_ids_by_status(statuses)
            if not status_agent_ids:
                self.logger.info(
                    "No agents match the requested host statuses",
                    host_status=[status.value for status in statuses],
                )
                return self._result_list([], 0, offset, limit)

        unenrolled_agent_ids = await self.agent_client.find_unenrolled_agent_ids()

        search_request = build_list_request(
            self.config.metadata_index,
            paging,
            kql,
            unenrolled_agent_ids,
            status_agent_ids,
        )
        self.logger.debug(
            "Searching host metadata",
            offset=offset,
            limit=limit,
            unenrolled_agents=len(unenrolled_agent_ids),
            has_filter=bool(kql),
        )
        result = await self.search_client.search_request(search_request)
        hosts = await self._enrich(result.hits)
        return self._result_list(hosts, result.total, offset, limit)

    async def get_host(self, host_id: str) -> HostInfo:
        """Latest metadata and status of one host."""
        result = await self.search_client.search_request(
            build_host_request(self.config.metadata_index, host_id)
        )
        if not result.hits:
            raise EndpointNotFoundError(host_id)

        record = result.hits[0]
        await self.status_resolver.ensure_active(record.agent_id)
        host_status = await self.status_resolver.resolve(record.agent_id)
        return HostInfo(metadata=record.metadata, host_status=host_status)

    async def _enrich(self, records: List[HostMetadataRecord]) -> List[HostInfo]:
        """Resolve statuses concurrently, keeping hit order."""
        semaphore = asyncio.Semaphore(self.config.status_lookup_concurrency)

        async def resolve(record: HostMetadataRecord) -> HostStatus:
            async with semaphore:
                return await self.status_resolver.resolve(record.agent_id)

        statuses = await asyncio.gather(*(resolve(record) for record in records))
        return [
            HostInfo(metadata=record.metadata, host_status=status)
            for record, status in zip(records, statuses)
        ]

    def _result_list(
        self, hosts: List[HostInfo], total: int, offset: int, limit: int
    ) -> HostResultList:
        return HostResultList(
            hosts=hosts,
            total=total,
            request_page_index=offset,
            request_page_size=limit,
            query_strategy_version=self.query_strategy_version,
        )
