"""Test utilities and fixtures for Endpoint Metadata Service tests."""

import os
import sys
import uuid
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from config import ApplicationConfig
from models import Agent
from services.search_client import parse_search_response

UNENROLLED_AGENT_IDS = [
    "00000000-0000-0000-0000-000000000000",
    "11111111-1111-1111-1111-111111111111",
]


@pytest.fixture(scope="session")
def mock_config() -> ApplicationConfig:
    """Create a mock configuration for testing."""
    # Set environment variables for testing
    os.environ["SEARCH_URL"] = "http://localhost:9200"
    os.environ["AGENT_SERVICE_URL"] = "http://localhost:5601"
    os.environ["AGENT_SERVICE_API_KEY"] = "test-api-key"
    os.environ["METADATA_INDEX"] = "metrics-endpoint.metadata-*"

    # Instantiate the config object, which will load from the environment
    return ApplicationConfig()


def create_host_metadata(
    host_id: Optional[str] = None,
    agent_id: Optional[str] = None,
    ip: str = "10.140.73.246",
) -> Dict[str, Any]:
    """Create a host metadata document as the endpoint writes it."""
    host_id = host_id or str(uuid.uuid4())
    agent_id = agent_id or str(uuid.uuid4())
    return {
        "@timestamp": 1603390829000,
        "event": {"created": 1603390829000, "kind": "metric", "dataset": "endpoint.metadata"},
        "elastic": {"agent": {"id": agent_id}},
        "agent": {"id": agent_id, "type": "endpoint", "version": "7.10.0"},
        "host": {
            "id": host_id,
            "hostname": f"host-{host_id[:8]}",
            "ip": [ip],
            "mac": ["a2-c4-ab-ee-9c-e5"],
            "os": {"name": "Windows", "version": "10.0", "platform": "windows"},
        },
        "Endpoint": {
            "status": "enrolled",
            "policy": {
                "applied": {
                    "id": "C2A9093E-E289-4C0A-AA44-8C32A414FA7A",
                    "name": "With Eventing",
                    "status": "success",
                }
            },
        },
    }


def create_search_response(*documents: Dict[str, Any], collapsed: bool = True) -> Dict[str, Any]:
    """Create a raw ``_search`` response holding the given documents."""
    hits: List[Dict[str, Any]] = []
    for document in documents:
        doc_id = str(uuid.uuid4())
        hit: Dict[str, Any] = {
            "_index": "metrics-endpoint.metadata-default",
            "_id": doc_id,
            "_score": None,
            "_source": document,
        }
        if collapsed:
            hit["fields"] = {"host.id": [document["host"]["id"]]}
            hit["inner_hits"] = {
                "most_recent": {
                    "hits": {
                        "total": {"value": 1, "relation": "eq"},
                        "hits": [{"_id": doc_id, "_source": document}],
                    }
                }
            }
        hits.append(hit)

    response: Dict[str, Any] = {
        "took": 1,
        "timed_out": False,
        "hits": {"total": {"value": len(hits), "relation": "eq"}, "hits": hits},
    }
    if collapsed:
        response["aggregations"] = {"total": {"value": len(hits)}}
    return response


def create_search_result(*documents: Dict[str, Any], collapsed: bool = True):
    """Parsed SearchResult for the given documents."""
    return parse_search_response(create_search_response(*documents, collapsed=collapsed))


@pytest.fixture
def mock_agent_client() -> AsyncMock:
    """Create a mock agent service client."""
    mock_client = AsyncMock()
    mock_client.find_unenrolled_agent_ids = AsyncMock(return_value=list(UNENROLLED_AGENT_IDS))
    mock_client.find_agent_ids_by_status = AsyncMock(return_value=[])
    mock_client.get_agent_status_by_id = AsyncMock(return_value="error")
    mock_client.get_agent = AsyncMock(
        side_effect=lambda agent_id: Agent(id=agent_id, active=True, status="online")
    )
    mock_client.ping = AsyncMock(return_value=True)
    return mock_client


@pytest.fixture
def mock_search_client() -> AsyncMock:
    """Create a mock search client returning one host."""
    mock_client = AsyncMock()
    mock_client.search_request = AsyncMock(return_value=create_search_result(create_host_metadata()))
    mock_client.ping = AsyncMock(return_value=True)
    return mock_client
