"""
Common query parameter models for API endpoints.

These are used with FastAPI's Depends() to provide reusable query parameter
sets across routes.
"""

from typing import Annotated

from fastapi import Query
from pydantic import BaseModel, Field

from cats_api.config import settings


class PaginationParams(BaseModel):
    """Common pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number")
    page_size: int = Field(default=10, ge=1, description="Items per page")


def pagination_params(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[
        int,
        Query(alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"),
    ] = settings.DEFAULT_PAGE_SIZE,
) -> PaginationParams:
    """Read ?page=&pageSize= from the query string."""
    return PaginationParams(page=page, page_size=page_size)
