"""Host status resolution from the agent management service."""

from typing import Dict, List, Optional, Protocol

from models import Agent, HostStatus
from utils import create_contextual_logger
from .exceptions import (
    AgentNotFoundError,
    AgentServiceError,
    InactiveAgentError,
    InvalidFilterError,
)
from .health_metrics import status_lookup_failures, status_lookups

# Raw agent states with a known host status; everything else is an error.
HOST_STATUS_MAPPING: Dict[str, HostStatus] = {
    "online": HostStatus.ONLINE,
    "offline": HostStatus.OFFLINE,
    "enrolling": HostStatus.OFFLINE,
}


class AgentLookup(Protocol):
    async def get_agent_status_by_id(self, agent_id: str) -> str: ...

    async def get_agent(self, agent_id: str) -> Agent: ...


def map_agent_status(raw_status: Optional[str]) -> HostStatus:
    """Map a raw agent status to a HostStatus."""
    if raw_status is None:
        return HostStatus.ERROR
    return HOST_STATUS_MAPPING.get(raw_status.lower(), HostStatus.ERROR)


def host_status_kuery(status: HostStatus) -> str:
    """Agent service kuery matching the raw states that map to ``status``.

    Built from HOST_STATUS_MAPPING so a host listed under a status filter is
    reported with that same status. ERROR is everything outside the table.

    Raises:
        InvalidFilterError: No raw state maps to ``status``.
    """
    if status == HostStatus.ERROR:
        known = " or ".join(f"status:{raw}" for raw in HOST_STATUS_MAPPING)
        return f"not ({known})"

    raw_states: List[str] = [raw for raw, mapped in HOST_STATUS_MAPPING.items() if mapped == status]
    if not raw_states:
        raise InvalidFilterError(f"host_status {status.value} is never reported and cannot be filtered on")
    return " or ".join(f"status:{raw}" for raw in raw_states)


class StatusResolver:
    """Resolves host statuses, turning lookup failures into ERROR."""

    def __init__(self, agent_lookup: AgentLookup) -> None:
        self.agent_lookup = agent_lookup
        self.logger = create_contextual_logger(__name__, service="status_resolver")

    async def resolve(self, agent_id: Optional[str]) -> HostStatus:
        """Status of the host behind ``agent_id``. Never raises lookup errors."""
        if not agent_id:
            status_lookup_failures.labels(reason="missing_agent_id").inc()
            status = HostStatus.ERROR
        else:
            try:
                raw_status = await self.agent_lookup.get_agent_status_by_id(agent_id)
                status = map_agent_status(raw_status)
            except AgentNotFoundError:
                self.logger.warning("Agent not found while resolving host status", agent_id=agent_id)
                status_lookup_failures.labels(reason="not_found").inc()
                status = HostStatus.ERROR
            except AgentServiceError as e:
                self.logger.warning(
                    "Agent status lookup failed", agent_id=agent_id, error=str(e)
                )
                status_lookup_failures.labels(reason="service_error").inc()
                status = HostStatus.ERROR

        status_lookups.labels(status=status.value).inc()
        return status

    async def find_agent(self, agent_id: Optional[str]) -> Optional[Agent]:
        """Agent record, or None when the agent service does not know it."""
        if not agent_id:
            return None
        try:
            return await self.agent_lookup.get_agent(agent_id)
        except AgentNotFoundError:
            self.logger.info("Agent record not found", agent_id=agent_id)
            return None

    async def ensure_active(self, agent_id: Optional[str]) -> None:
        """Raise InactiveAgentError when the agent has been unenrolled."""
        agent = await self.find_agent(agent_id)
        if agent is not None and not agent.active:
            raise InactiveAgentError(agent.id)
