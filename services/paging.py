"""Paging resolution for host list requests."""

from typing import List, Optional, Tuple

from models import PagingProperty, PagingRequest
from .exceptions import InvalidPagingError

DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE_INDEX = 0
MAX_PAGE_SIZE = 10000


def resolve_paging(
    paging_properties: Optional[List[PagingProperty]],
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> PagingRequest:
    """Fold ``paging_properties`` entries into a validated PagingRequest.

    Later entries win when the same property is given more than once.
    """
    page_size = default_page_size
    page_index = DEFAULT_PAGE_INDEX
    for prop in paging_properties or []:
        if prop.page_size is not None:
            page_size = prop.page_size
        if prop.page_index is not None:
            page_index = prop.page_index

    paging = PagingRequest(page_index=page_index, page_size=page_size)
    validate_paging(paging, max_page_size)
    return paging


def validate_paging(paging: PagingRequest, max_page_size: int = MAX_PAGE_SIZE) -> None:
    if paging.page_size <= 0:
        raise InvalidPagingError(f"page_size must be positive, got {paging.page_size}")
    if paging.page_size > max_page_size:
        raise InvalidPagingError(
            f"page_size must not exceed {max_page_size}, got {paging.page_size}"
        )
    if paging.page_index < 0:
        raise InvalidPagingError(f"page_index must not be negative, got {paging.page_index}")


def to_offset_limit(paging: PagingRequest) -> Tuple[int, int]:
    """Backend offset and limit for a page."""
    if paging.page_size <= 0 or paging.page_index < 0:
        raise InvalidPagingError(
            f"Invalid paging: page_index={paging.page_index}, page_size={paging.page_size}"
        )
    return paging.page_index * paging.page_size, paging.page_size
