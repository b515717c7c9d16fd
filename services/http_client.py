"""Shared HTTP plumbing for the search and agent service clients.

Requests are made synchronously with ``requests`` and handed to a thread pool
so async callers never block the event loop.
"""

import asyncio
import contextvars
from collections import namedtuple
from concurrent.futures import Executor
from typing import Any, Dict, Optional

import requests

from utils import create_contextual_logger, get_correlation_id

# Result object to pass between sync and async contexts
SyncRequestResult = namedtuple("SyncRequestResult", ["json_data", "error", "status_code"])


class ServiceHttpClient:
    """Base client for a JSON-over-HTTP collaborator."""

    service_name = "http_service"

    def __init__(
        self,
        base_url: str,
        timeout: float,
        user_agent: str,
        headers: Optional[Dict[str, str]] = None,
        verify: bool = True,
        executor: Optional[Executor] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self.extra_headers = headers or {}
        self.verify = verify
        self.executor = executor
        self.logger = create_contextual_logger(__name__, service=self.service_name)

    def _execute_sync_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
    ) -> SyncRequestResult:
        """Executes a synchronous HTTP request and returns a result object."""
        full_url = self.base_url + endpoint
        headers = {
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
            **self.extra_headers,
        }
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id

        try:
            with requests.Session() as session:
                response = session.request(
                    method=method.upper(),
                    url=full_url,
                    json=data,
                    params=params,
                    timeout=self.timeout,
                    headers=headers,
                    verify=self.verify,
                )
                response.raise_for_status()
                return SyncRequestResult(json_data=response.json(), error=None, status_code=response.status_code)
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            self.logger.warning(
                f"SYNC HTTP request failed: {e}",
                method=method.upper(),
                endpoint=endpoint,
                status_code=status_code,
            )
            return SyncRequestResult(json_data=None, error=str(e), status_code=status_code)
        except (requests.exceptions.RequestException, ValueError) as e:
            self.logger.error(f"SYNC HTTP request failed: {e}", method=method.upper(), endpoint=endpoint)
            return SyncRequestResult(json_data=None, error=str(e), status_code=None)

    async def _make_async_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> SyncRequestResult:
        """Run the sync request in the executor, bounded by the client timeout.

        The call runs in a copy of the caller's context so logs written on the
        worker thread keep the request's correlation id.

        Raises ``asyncio.TimeoutError`` when the call does not finish in time.
        """
        loop = asyncio.get_running_loop()
        correlation_id = get_correlation_id()
        context = contextvars.copy_context()
        return await asyncio.wait_for(
            loop.run_in_executor(
                self.executor,
                context.run,
                self._execute_sync_request,
                method,
                endpoint,
                data,
                params,
                correlation_id,
            ),
            timeout=self.timeout,
        )

    async def ping(self, endpoint: str = "/") -> bool:
        """Return True when the collaborator answers the endpoint."""
        try:
            result = await self._make_async_request("GET", endpoint)
        except asyncio.TimeoutError:
            return False
        return result.error is None
