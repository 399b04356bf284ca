"""
Shared Schemas: Envelope and Pagination

Every response uses the same envelope:

    success response:   {"success": true, "data": ...}
    paginated response: {"success": true, "data": [...], "pagination": {...}}
    plain list:         {"success": true, "count": 3, "data": [...]}
    error response:     {"success": false, "message": "..."}

Field names are camelCase on the wire (publishedYear, averageRating, ...)
through APIModel's alias generator. Requests accept either spelling.
"""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class APIModel(BaseModel):
    """Base model: camelCase aliases, readable from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Pagination
# =============================================================================


class PaginationMeta(APIModel):
    """
    Offset pagination metadata.

    Invariants:
    - total_pages == ceil(total_items / limit)
    - has_next_page <=> page < total_pages
    - has_prev_page <=> page > 1
    """

    page: int = Field(..., ge=1, description="Current page number (1-indexed)")
    limit: int = Field(..., ge=1, description="Items per page")
    total_items: int = Field(..., ge=0, description="Total matching items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    has_next_page: bool = Field(..., description="Whether a later page exists")
    has_prev_page: bool = Field(..., description="Whether an earlier page exists")

    @classmethod
    def build(cls, page: int, limit: int, total_items: int) -> "PaginationMeta":
        """
        Compute pagination metadata from the request and the total count.

        Example:
            >>> PaginationMeta.build(page=2, limit=5, total_items=12).total_pages
            3
        """
        total_pages = math.ceil(total_items / limit)
        return cls(
            page=page,
            limit=limit,
            total_items=total_items,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


# =============================================================================
# Envelopes
# =============================================================================


class DataResponse(APIModel, Generic[DataT]):
    """Successful response carrying a single payload."""

    success: bool = True
    data: DataT


class ListResponse(APIModel, Generic[DataT]):
    """Successful, unpaginated list response."""

    success: bool = True
    count: int = Field(..., ge=0)
    data: list[DataT]


class PaginatedResponse(APIModel, Generic[DataT]):
    """Successful response with pagination metadata."""

    success: bool = True
    pagination: PaginationMeta
    data: DataT


class ErrorResponse(APIModel):
    """Error envelope rendered by the exception handlers in app.main."""

    success: bool = False
    message: str
    errors: list[str] | None = Field(
        default=None,
        description="Per-field validation messages, when available",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "message": "Book not found",
            }
        },
    )
