"""Search backend client for host metadata documents."""

import asyncio
import time
from concurrent.futures import Executor
from typing import Any, Dict, Optional

from config import ApplicationConfig
from models import HostMetadataRecord, SearchResult
from .exceptions import SearchBackendError
from .health_metrics import search_duration_seconds
from .http_client import ServiceHttpClient


def parse_search_response(response: Dict[str, Any]) -> SearchResult:
    """Turn a raw ``_search`` response into a SearchResult.

    The match count comes from the ``total`` aggregation when the query
    requested one (collapsed searches), otherwise from ``hits.total``.
    """
    hits_section = response.get("hits", {}) or {}
    hits = [HostMetadataRecord.from_hit(hit) for hit in hits_section.get("hits", [])]

    total_agg = (response.get("aggregations") or {}).get("total")
    if total_agg is not None:
        total = int(total_agg.get("value", 0))
    else:
        raw_total = hits_section.get("total", len(hits))
        total = int(raw_total.get("value", 0)) if isinstance(raw_total, dict) else int(raw_total)
    return SearchResult(hits=hits, total=total)


class SearchClient(ServiceHttpClient):
    """Client for the search backend's ``_search`` API."""

    service_name = "search_client"

    def __init__(self, config: ApplicationConfig, executor: Optional[Executor] = None) -> None:
        headers = {}
        if config.search_api_key:
            headers["Authorization"] = f"ApiKey {config.search_api_key}"
        super().__init__(
            base_url=config.search_url,
            timeout=config.search_timeout,
            user_agent=f"Endpoint-Metadata-Service/{config.app_version}",
            headers=headers,
            verify=config.search_verify_tls,
            executor=executor,
        )

    async def search(
        self, index: str, body: Dict[str, Any], offset: int = 0, limit: int = 10
    ) -> SearchResult:
        """Run a search and parse hits and total."""
        params = {"from": offset, "size": limit}
        started = time.perf_counter()
        try:
            result = await self._make_async_request(
                "POST", f"/{index}/_search", data=body, params=params
            )
        except asyncio.TimeoutError as e:
            raise SearchBackendError(f"Search on {index} timed out") from e
        finally:
            search_duration_seconds.observe(time.perf_counter() - started)

        if result.error:
            raise SearchBackendError(f"Search on {index} failed: {result.error}")
        return parse_search_response(result.json_data or {})

    async def search_request(self, request: Dict[str, Any]) -> SearchResult:
        """Run a request produced by the query builder."""
        return await self.search(
            request["index"], request["body"], offset=request["from"], limit=request["size"]
        )
