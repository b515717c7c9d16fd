"""Unit tests for Endpoint Metadata Service models."""

import pytest
from pydantic import ValidationError

from models import (
    HostInfo,
    HostListRequest,
    HostMetadataRecord,
    HostResultList,
    HostStatus,
    MetadataQueryStrategyVersions,
)

from conftest import create_host_metadata, create_search_response


class TestHostMetadataRecord:
    """Test cases for HostMetadataRecord."""

    def test_from_collapsed_hit(self) -> None:
        document = create_host_metadata(host_id="host-1", agent_id="agent-1")
        hit = create_search_response(document)["hits"]["hits"][0]

        record = HostMetadataRecord.from_hit(hit)

        assert record.id == hit["_id"]
        assert record.host_id == "host-1"
        assert record.agent_id == "agent-1"
        assert record.metadata["Endpoint"]["status"] == "enrolled"

    def test_from_hit_without_agent(self) -> None:
        record = HostMetadataRecord.from_hit({"_id": "doc-1", "_source": {"host": {"id": "h"}}})

        assert record.agent_id is None
        assert record.host_id == "h"

    def test_records_are_immutable(self) -> None:
        record = HostMetadataRecord(id="doc-1")

        with pytest.raises(ValidationError):
            record.agent_id = "other"


class TestHostResultList:
    """Test cases for HostResultList serialization."""

    def test_serializes_enums_as_strings(self) -> None:
        envelope = HostResultList(
            hosts=[HostInfo(metadata={"host": {"id": "h"}}, host_status=HostStatus.ONLINE)],
            total=1,
            request_page_index=0,
            request_page_size=10,
            query_strategy_version=MetadataQueryStrategyVersions.VERSION_1,
        )

        data = envelope.model_dump(mode="json")

        assert data["hosts"][0]["host_status"] == "online"
        assert data["query_strategy_version"] == "v1"

    def test_rejects_negative_total(self) -> None:
        with pytest.raises(ValidationError):
            HostResultList(
                total=-1,
                request_page_index=0,
                request_page_size=10,
                query_strategy_version=MetadataQueryStrategyVersions.VERSION_1,
            )


class TestHostListRequest:
    """Test cases for the list request schema."""

    def test_paging_and_filters(self) -> None:
        request = HostListRequest.model_validate(
            {
                "paging_properties": [{"page_size": 10}, {"page_index": 1}],
                "filters": {"kql": "not host.ip:10.140.73.246", "host_status": ["online"]},
            }
        )

        assert request.paging_properties[0].page_size == 10
        assert request.paging_properties[1].page_index == 1
        assert request.filters.kql == "not host.ip:10.140.73.246"
        assert request.filters.host_status == [HostStatus.ONLINE]

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HostListRequest.model_validate({"filters": {"host_status": ["sleeping"]}})

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HostListRequest.model_validate({"paging": {"size": 10}})
