"""
Standardized Pagination for all routers.

Usage:
    from rest_api.routers._common.pagination import Pagination, get_pagination

    @router.get("/shops")
    def list_shops(
        pagination: Pagination = Depends(get_pagination),
        db: Session = Depends(get_db),
    ):
        items, total = service.list_shops(pagination.offset, pagination.limit)
        return paginated(items, total, pagination)
"""

from dataclasses import dataclass
from typing import Any, Sequence

from fastapi import Query

from shared.config.constants import Limits
from shared.utils.schemas import PageInfo, PaginatedResponse


@dataclass
class Pagination:
    """
    Page-based pagination parameters.

    Attributes:
        page: 1-indexed page number
        limit: Items per page (1 to max_limit)
        max_limit: Maximum allowed limit
    """

    page: int
    limit: int
    max_limit: int = Limits.MAX_PAGE_SIZE

    def __post_init__(self):
        """Validate and normalize values."""
        self.limit = min(max(1, self.limit), self.max_limit)
        self.page = max(1, self.page)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def pages(self, total: int) -> int:
        return (total + self.limit - 1) // self.limit if total > 0 else 0

    def to_page_info(self, total: int) -> PageInfo:
        """Pagination block; next/prev are page numbers, null at the edges."""
        return PageInfo(
            page=self.page,
            limit=self.limit,
            pages=self.pages(total),
            next=self.page + 1 if self.offset + self.limit < total else None,
            prev=self.page - 1 if self.page > 1 else None,
        )


def get_pagination(
    page: int = Query(
        default=1,
        ge=1,
        description="Page number (1-indexed)",
    ),
    limit: int = Query(
        default=Limits.DEFAULT_PAGE_SIZE,
        ge=1,
        le=Limits.MAX_PAGE_SIZE,
        description="Maximum number of items per page",
    ),
) -> Pagination:
    """
    FastAPI dependency for pagination.

    Usage:
        @router.get("/items")
        def list_items(pagination: Pagination = Depends(get_pagination)):
            ...
    """
    return Pagination(page=page, limit=limit)


def paginated(items: Sequence[Any], total: int, pagination: Pagination) -> PaginatedResponse:
    """Wrap one page of already-rendered items in the paginated envelope."""
    return PaginatedResponse(
        count=len(items),
        total=total,
        pagination=pagination.to_page_info(total),
        data=list(items),
    )
