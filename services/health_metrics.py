"""Health and metrics service for the Endpoint Metadata Service.

This service provides health monitoring and metrics collection.
"""

import asyncio
import time
from typing import Any, Dict

from prometheus_client import Counter, Histogram, generate_latest

from config import ApplicationConfig
from utils import create_contextual_logger
from .http_client import ServiceHttpClient

metadata_requests = Counter(
    "endpoint_metadata_requests_total",
    "Total number of host metadata requests",
    ["route", "outcome"],
)

status_lookups = Counter(
    "endpoint_status_lookups_total",
    "Total number of resolved host statuses",
    ["status"],
)

status_lookup_failures = Counter(
    "endpoint_status_lookup_failures_total",
    "Host status lookups that fell back to the error status",
    ["reason"],
)

search_duration_seconds = Histogram(
    "endpoint_metadata_search_duration_seconds",
    "Latency of search backend calls",
)


def _counter_values(counter: Counter) -> Dict[str, float]:
    """Current value of every label combination of a counter."""
    values: Dict[str, float] = {}
    for metric in counter.collect():
        for sample in metric.samples:
            if not sample.name.endswith("_total"):
                continue
            key = ",".join(f"{k}={v}" for k, v in sorted(sample.labels.items()))
            values[key] = sample.value
    return values


class HealthMetricsService:
    """Service for health monitoring and metrics."""

    def __init__(
        self,
        config: ApplicationConfig,
        search_client: ServiceHttpClient,
        agent_client: ServiceHttpClient,
    ) -> None:
        self.config = config
        self.search_client = search_client
        self.agent_client = agent_client
        self.logger = create_contextual_logger(__name__, service="health_metrics")
        self._start_time = time.time()

    async def get_health_status(self) -> Dict[str, Any]:
        """Check both collaborators and summarize."""
        search_ok, agent_service_ok = await asyncio.gather(
            self.search_client.ping("/"),
            self.agent_client.ping("/api/status"),
        )
        if search_ok and agent_service_ok:
            status = "healthy"
        elif search_ok or agent_service_ok:
            status = "degraded"
        else:
            status = "unhealthy"

        if status != "healthy":
            self.logger.warning(
                "Collaborator health check failed",
                search_connected=search_ok,
                agent_service_connected=agent_service_ok,
            )

        return {
            "status": status,
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "version": self.config.app_version,
            "uptime_seconds": int(time.time() - self._start_time),
            "search_connected": search_ok,
            "agent_service_connected": agent_service_ok,
        }

    async def get_metrics_data(self) -> Dict[str, Any]:
        """Counters in JSON form."""
        return {
            "uptime_seconds": int(time.time() - self._start_time),
            "metadata_requests": _counter_values(metadata_requests),
            "status_lookups": _counter_values(status_lookups),
            "status_lookup_failures": _counter_values(status_lookup_failures),
        }

    def get_prometheus_metrics(self) -> str:
        """Prometheus text exposition of the default registry."""
        return generate_latest().decode("utf-8")
