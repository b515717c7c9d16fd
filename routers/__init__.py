"""API routers for the Endpoint Metadata Service."""

from .health import router as health_router
from .metadata import router as metadata_router
from .metrics import router as metrics_router

__all__ = ["health_router", "metadata_router", "metrics_router"]
