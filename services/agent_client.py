"""Agent management (Fleet) service client.

This module handles all communication with the agent management API.
"""

import asyncio
from concurrent.futures import Executor
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from config import ApplicationConfig
from models import Agent, AgentPage, HostStatus
from .exceptions import AgentNotFoundError, AgentServiceError
from .http_client import ServiceHttpClient
from .status_resolver import host_status_kuery

AGENTS_ENDPOINT = "/api/fleet/agents"
UNENROLLED_AGENTS_KUERY = "fleet-agents.active : false"


class AgentServiceClient(ServiceHttpClient):
    """Client for agent lookups and listings."""

    service_name = "agent_service_client"

    def __init__(self, config: ApplicationConfig, executor: Optional[Executor] = None) -> None:
        headers = {"kbn-xsrf": "true"}
        if config.agent_service_api_key:
            headers[config.api_key_header] = f"ApiKey {config.agent_service_api_key}"
        super().__init__(
            base_url=config.agent_service_url,
            timeout=config.agent_service_timeout,
            user_agent=f"Endpoint-Metadata-Service/{config.app_version}",
            headers=headers,
            executor=executor,
        )
        self.page_size = config.unenrolled_agents_page_size

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        agent_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        try:
            result = await self._make_async_request(method, endpoint, params=params)
        except asyncio.TimeoutError as e:
            raise AgentServiceError(f"Agent service request {endpoint} timed out") from e
        if result.error:
            if result.status_code == 404 and agent_id is not None:
                raise AgentNotFoundError(agent_id)
            raise AgentServiceError(f"Agent service request {endpoint} failed: {result.error}")
        return result.json_data or {}

    async def get_agent(self, agent_id: str) -> Agent:
        """Fetch one agent record. Raises AgentNotFoundError on 404."""
        data = await self._request("GET", f"{AGENTS_ENDPOINT}/{agent_id}", agent_id=agent_id)
        item = data.get("item", data)
        try:
            return Agent(**{"id": agent_id, **item})
        except ValidationError as e:
            raise AgentServiceError(f"Malformed agent record for {agent_id}: {e}") from e

    async def get_agent_status_by_id(self, agent_id: str) -> str:
        """Raw status string of one agent."""
        agent = await self.get_agent(agent_id)
        if agent.status is None:
            raise AgentServiceError(f"Agent {agent_id} has no status")
        return agent.status

    async def list_agents(
        self,
        kuery: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
        show_inactive: bool = False,
    ) -> AgentPage:
        """Fetch one page of agents matching a kuery."""
        params: Dict[str, Any] = {
            "page": page,
            "perPage": per_page,
            "showInactive": str(show_inactive).lower(),
        }
        if kuery:
            params["kuery"] = kuery
        data = await self._request("GET", AGENTS_ENDPOINT, params=params)
        items = data.get("items", data.get("list", []))
        try:
            agents = [Agent(**agent) for agent in items]
        except (TypeError, ValidationError) as e:
            raise AgentServiceError(f"Malformed agent listing for kuery {kuery!r}: {e}") from e
        return AgentPage(
            agents=agents,
            total=data.get("total"),
            page=data.get("page", page),
            per_page=data.get("perPage", per_page),
        )

    async def list_agent_ids(self, kuery: str, show_inactive: bool = False) -> List[str]:
        """Collect the ids of every agent matching a kuery, page by page.

        The service may return fewer agents than requested per page, so paging
        stops once ``total`` ids are collected or a page comes back empty.
        """
        agent_ids: List[str] = []
        page = 1
        while True:
            result = await self.list_agents(
                kuery=kuery, page=page, per_page=self.page_size, show_inactive=show_inactive
            )
            agent_ids.extend(agent.id for agent in result.agents)
            if not result.agents or (result.total is not None and len(agent_ids) >= result.total):
                return agent_ids
            page += 1

    async def find_unenrolled_agent_ids(self) -> List[str]:
        """Ids of every agent that has been unenrolled."""
        return await self.list_agent_ids(UNENROLLED_AGENTS_KUERY, show_inactive=True)

    async def find_agent_ids_by_status(self, statuses: List[HostStatus]) -> List[str]:
        """Ids of the agents behind hosts in any of the given states."""
        kuery = " or ".join(f"({host_status_kuery(status)})" for status in statuses)
        return await self.list_agent_ids(kuery)
