"""
Reviews Router

Endpoints:
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review (owner only)

Reviews are created through POST /books/{book_id}/reviews.

Business Rules:
- Only the review author can update or delete their review
- Every change recalculates the book's rating statistics
"""

from typing import Any

from fastapi import APIRouter, Body, Request

from app.config import get_settings
from app.dependencies import CurrentUser, DbSession
from app.schemas import DataResponse, ErrorResponse, ReviewResponse
from app.services import reviews
from app.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated or not the review owner"},
        404: {"model": ErrorResponse, "description": "Review not found"},
    },
)


@router.put(
    "/{review_id}",
    response_model=DataResponse[ReviewResponse],
    summary="Update a review",
    description="Update your own review's rating and/or comment.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: int,
    db: DbSession,
    current_user: CurrentUser,
    review_data: Any = Body(
        default=None,
        description="Fields to change: rating (1-5) and/or comment (1-500 characters)",
        examples=[{"rating": 4, "comment": "Better on a second read."}],
    ),
) -> DataResponse[ReviewResponse]:
    """
    Update an existing review owned by the caller.

    The body is validated by the service after the ownership check.
    """
    review = reviews.update_review(
        db,
        review_id=review_id,
        caller_id=current_user.id,
        fields=review_data,
    )
    return DataResponse(data=ReviewResponse.model_validate(review))


@router.delete(
    "/{review_id}",
    response_model=DataResponse[dict],
    summary="Delete a review",
    description="Delete your own review.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[dict]:
    """Delete a review owned by the caller."""
    reviews.delete_review(db, review_id=review_id, caller_id=current_user.id)
    return DataResponse(data={})
