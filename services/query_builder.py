"""Search query construction for host metadata lookups.

The shapes produced here are asserted literally by clients of the v1 query
strategy: a list query without a user filter is the bare agent clause, a
list query with one is ``bool.must[agent clause, filter]``.
"""

from typing import Any, Dict, Optional, Sequence

from models import PagingRequest
from .kql import kql_to_query
from .paging import to_offset_limit

Query = Dict[str, Any]

AGENT_ID_FIELD = "elastic.agent.id"
HOST_ID_FIELD = "host.id"
EVENT_CREATED_FIELD = "event.created"


def build_agent_clause(
    unenrolled_agent_ids: Sequence[str],
    status_agent_ids: Optional[Sequence[str]] = None,
) -> Optional[Query]:
    """Clause excluding unenrolled agents and restricting to status matches."""
    clause: Dict[str, Any] = {}
    if unenrolled_agent_ids:
        clause["must_not"] = {"terms": {AGENT_ID_FIELD: list(unenrolled_agent_ids)}}
    if status_agent_ids:
        clause["filter"] = {"terms": {AGENT_ID_FIELD: list(status_agent_ids)}}
    if not clause:
        return None
    return {"bool": clause}


def build_query(
    kql: Optional[str],
    unenrolled_agent_ids: Sequence[str],
    status_agent_ids: Optional[Sequence[str]] = None,
) -> Query:
    """Build the query part of a host list search."""
    agent_clause = build_agent_clause(unenrolled_agent_ids, status_agent_ids)
    filter_query = kql_to_query(kql)

    if filter_query is not None:
        clauses = []
        if agent_clause is not None:
            clauses.append(agent_clause)
        clauses.append(filter_query)
        return {"bool": {"must": clauses}}

    if agent_clause is not None:
        return agent_clause
    return {"match_all": {}}


def build_list_request(
    index: str,
    paging: PagingRequest,
    kql: Optional[str],
    unenrolled_agent_ids: Sequence[str],
    status_agent_ids: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """Full search request for one page of the latest document per host."""
    offset, limit = to_offset_limit(paging)
    return {
        "index": index,
        "from": offset,
        "size": limit,
        "body": {
            "query": build_query(kql, unenrolled_agent_ids, status_agent_ids),
            "collapse": {
                "field": HOST_ID_FIELD,
                "inner_hits": {
                    "name": "most_recent",
                    "size": 1,
                    "sort": [{EVENT_CREATED_FIELD: "desc"}],
                },
            },
            "aggs": {"total": {"cardinality": {"field": HOST_ID_FIELD}}},
            "sort": [{EVENT_CREATED_FIELD: {"order": "desc"}}],
        },
    }


def build_host_request(index: str, host_id: str) -> Dict[str, Any]:
    """Search request for the latest metadata document of one host."""
    return {
        "index": index,
        "from": 0,
        "size": 1,
        "body": {
            "query": {"match": {HOST_ID_FIELD: host_id}},
            "sort": [{EVENT_CREATED_FIELD: {"order": "desc"}}],
        },
    }
