"""Unit tests for host status resolution."""

from unittest.mock import AsyncMock

import pytest

from models import Agent, HostStatus
from services.exceptions import (
    AgentNotFoundError,
    AgentServiceError,
    InactiveAgentError,
    InvalidFilterError,
)
from services.status_resolver import (
    HOST_STATUS_MAPPING,
    StatusResolver,
    host_status_kuery,
    map_agent_status,
)


class TestMapAgentStatus:
    """Test cases for the raw status table."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("online", HostStatus.ONLINE),
            ("offline", HostStatus.OFFLINE),
            ("enrolling", HostStatus.OFFLINE),
            ("ONLINE", HostStatus.ONLINE),
        ],
    )
    def test_known_states(self, raw, expected) -> None:
        assert map_agent_status(raw) == expected

    @pytest.mark.parametrize("raw", ["warning", "error", "degraded", "unenrolling", "", "bogus", None])
    def test_other_states_are_error(self, raw) -> None:
        assert map_agent_status(raw) == HostStatus.ERROR


class TestHostStatusKuery:
    """Test cases for the host status filter kueries."""

    @pytest.mark.parametrize(
        "raw", ["online", "offline", "enrolling", "warning", "error", "degraded", "unenrolling", "updating"]
    )
    def test_raw_state_is_matched_by_its_status_kuery(self, raw) -> None:
        status = map_agent_status(raw)
        kuery = host_status_kuery(status)

        if status == HostStatus.ERROR:
            assert kuery.startswith("not (") and kuery.endswith(")")
            assert f"status:{raw}" not in kuery[len("not ("):-1].split(" or ")
        else:
            assert f"status:{raw}" in kuery.split(" or ")

    @pytest.mark.parametrize("raw", list(HOST_STATUS_MAPPING))
    def test_known_state_is_matched_by_one_kuery_only(self, raw) -> None:
        matching = [
            status
            for status in (HostStatus.ONLINE, HostStatus.OFFLINE)
            if f"status:{raw}" in host_status_kuery(status).split(" or ")
        ]

        assert matching == [map_agent_status(raw)]
        assert f"status:{raw}" in host_status_kuery(HostStatus.ERROR)[len("not ("):-1].split(" or ")

    def test_offline_includes_enrolling(self) -> None:
        assert host_status_kuery(HostStatus.OFFLINE) == "status:offline or status:enrolling"

    def test_error_excludes_every_known_state(self) -> None:
        assert host_status_kuery(HostStatus.ERROR) == (
            "not (status:online or status:offline or status:enrolling)"
        )

    def test_unenrolling_is_rejected(self) -> None:
        with pytest.raises(InvalidFilterError, match="unenrolling"):
            host_status_kuery(HostStatus.UNENROLLING)


class TestStatusResolver:
    """Test cases for StatusResolver."""

    @pytest.fixture
    def agent_lookup(self) -> AsyncMock:
        lookup = AsyncMock()
        lookup.get_agent_status_by_id = AsyncMock(return_value="online")
        lookup.get_agent = AsyncMock(return_value=Agent(id="agent-1", active=True))
        return lookup

    @pytest.mark.asyncio
    async def test_resolve_online(self, agent_lookup) -> None:
        resolver = StatusResolver(agent_lookup)

        assert await resolver.resolve("agent-1") == HostStatus.ONLINE
        agent_lookup.get_agent_status_by_id.assert_awaited_once_with("agent-1")

    @pytest.mark.asyncio
    async def test_not_found_becomes_error(self, agent_lookup) -> None:
        agent_lookup.get_agent_status_by_id.side_effect = AgentNotFoundError("agent-1")
        resolver = StatusResolver(agent_lookup)

        assert await resolver.resolve("agent-1") == HostStatus.ERROR

    @pytest.mark.asyncio
    async def test_service_failure_becomes_error(self, agent_lookup) -> None:
        agent_lookup.get_agent_status_by_id.side_effect = AgentServiceError("timed out")
        resolver = StatusResolver(agent_lookup)

        assert await resolver.resolve("agent-1") == HostStatus.ERROR

    @pytest.mark.asyncio
    async def test_missing_agent_id_is_error_without_lookup(self, agent_lookup) -> None:
        resolver = StatusResolver(agent_lookup)

        assert await resolver.resolve(None) == HostStatus.ERROR
        agent_lookup.get_agent_status_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, agent_lookup) -> None:
        agent_lookup.get_agent_status_by_id.side_effect = RuntimeError("bug")
        resolver = StatusResolver(agent_lookup)

        with pytest.raises(RuntimeError):
            await resolver.resolve("agent-1")

    @pytest.mark.asyncio
    async def test_find_agent_not_found_is_none(self, agent_lookup) -> None:
        agent_lookup.get_agent.side_effect = AgentNotFoundError("agent-1")
        resolver = StatusResolver(agent_lookup)

        assert await resolver.find_agent("agent-1") is None

    @pytest.mark.asyncio
    async def test_find_agent_service_error_propagates(self, agent_lookup) -> None:
        agent_lookup.get_agent.side_effect = AgentServiceError("boom")
        resolver = StatusResolver(agent_lookup)

        with pytest.raises(AgentServiceError):
            await resolver.find_agent("agent-1")

    @pytest.mark.asyncio
    async def test_ensure_active_rejects_inactive_agent(self, agent_lookup) -> None:
        agent_lookup.get_agent.return_value = Agent(id="agent-1", active=False)
        resolver = StatusResolver(agent_lookup)

        with pytest.raises(InactiveAgentError) as exc_info:
            await resolver.ensure_active("agent-1")

        assert exc_info.value.agent_id == "agent-1"

    @pytest.mark.asyncio
    async def test_ensure_active_allows_unknown_agent(self, agent_lookup) -> None:
        agent_lookup.get_agent.side_effect = AgentNotFoundError("agent-1")
        resolver = StatusResolver(agent_lookup)

        await resolver.ensure_active("agent-1")
