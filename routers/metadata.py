"""Host metadata router for the Endpoint Metadata Service."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from models import HostInfo, HostListRequest, HostResultList
from services import (
    EndpointMetadataService,
    EndpointNotFoundError,
    InactiveAgentError,
    InvalidFilterError,
    InvalidPagingError,
    SearchBackendError,
)
from services.health_metrics import metadata_requests
from utils import get_logger, log_exception

METADATA_REQUEST_V1_ROUTE = "/api/endpoint/v1/metadata"
ENDPOINT_NOT_FOUND_MESSAGE = "Endpoint Not Found"

router = APIRouter(prefix=METADATA_REQUEST_V1_ROUTE, tags=["metadata"])
logger = get_logger(__name__)


def get_metadata_service(request: Request) -> EndpointMetadataService:
    """Dependency to get the metadata service from application state."""
    return request.app.state.metadata_service  # type: ignore[no-any-return]


@router.post("", response_model=HostResultList)
async def list_hosts(
    body: Optional[HostListRequest] = Body(default=None),
    metadata_service: EndpointMetadataService = Depends(get_metadata_service),
) -> HostResultList:
    """List the latest metadata of current hosts, one page at a time."""
    try:
        result = await metadata_service.list_hosts(body)
    except (InvalidPagingError, InvalidFilterError) as e:
        metadata_requests.labels(route="list", outcome="bad_request").inc()
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        metadata_requests.labels(route="list", outcome="error").inc()
        log_exception(logger, e, "Host metadata list failed", endpoint=METADATA_REQUEST_V1_ROUTE)
        detail = str(e) if isinstance(e, SearchBackendError) else "Host metadata list failed"
        raise HTTPException(status_code=500, detail=detail) from e

    metadata_requests.labels(route="list", outcome="ok").inc()
    return result


@router.get("/{host_id}", response_model=HostInfo)
async def get_host(
    host_id: str,
    metadata_service: EndpointMetadataService = Depends(get_metadata_service),
):
    """Latest metadata and status of one host."""
    try:
        result = await metadata_service.get_host(host_id)
    except EndpointNotFoundError:
        metadata_requests.labels(route="detail", outcome="not_found").inc()
        return PlainTextResponse(ENDPOINT_NOT_FOUND_MESSAGE, status_code=404)
    except InactiveAgentError as e:
        metadata_requests.labels(route="detail", outcome="bad_request").inc()
        logger.warning("Requested host has an unenrolled agent", host_id=host_id, agent_id=e.agent_id)
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        metadata_requests.labels(route="detail", outcome="error").inc()
        log_exception(logger, e, "Host metadata lookup failed", host_id=host_id)
        detail = str(e) if isinstance(e, SearchBackendError) else "Host metadata lookup failed"
        raise HTTPException(status_code=500, detail=detail) from e

    metadata_requests.labels(route="detail", outcome="ok").inc()
    return result
