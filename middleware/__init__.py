"""HTTP middleware for the Endpoint Metadata Service."""

from .correlation import CorrelationMiddleware

__all__ = ["CorrelationMiddleware"]
