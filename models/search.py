"""Search backend result models."""

from typing import List

from pydantic import BaseModel, Field

from .host import HostMetadataRecord


class SearchResult(BaseModel):
    """Hits of one search call together with the backend's match count."""

    hits: List[HostMetadataRecord] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
