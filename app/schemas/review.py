"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create a new review
- ReviewUpdate: Update an existing review (partial)
- ReviewResponse: Review data without nested relationships
- ReviewWithUser: Review plus reviewer identity (book listings/detail)
- ReviewWithBook: Review plus a summary of the reviewed book (user content)

Business Rules:
- Rating must be 1-5 (validated here and by a database check constraint)
- Comment must be 1-500 characters
- One review per user per book (enforced at database level)
"""

from datetime import datetime

from pydantic import Field, field_validator

from app.models.book import Genre
from app.schemas.common import APIModel
from app.schemas.user import ReviewerSummary


class ReviewCreate(APIModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "comment": "One of the best books I've ever read."
    }
    """

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Review text (1-500 characters)",
        examples=["A masterpiece of world-building."],
    )

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_blank(cls, v: str) -> str:
        """Strip whitespace; a whitespace-only comment is rejected."""
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class ReviewUpdate(APIModel):
    """
    Schema for updating an existing review.

    Both fields are optional; only the fields sent are changed.
    """

    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
    )

    comment: str | None = Field(
        default=None,
        min_length=1,
        max_length=500,
        description="Review text (1-500 characters)",
    )

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_blank(cls, v: str | None) -> str | None:
        """Validate comment is not just whitespace if provided."""
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Comment cannot be empty")
        return v


class ReviewResponse(APIModel):
    """Review row as returned by create/update."""

    id: int = Field(..., description="Unique review identifier")
    rating: int = Field(..., description="Rating from 1 to 5 stars")
    comment: str = Field(..., description="Review text")
    book_id: int = Field(..., description="ID of the reviewed book")
    user_id: int = Field(..., description="ID of the user who wrote the review")
    created_at: datetime
    updated_at: datetime


class ReviewWithUser(ReviewResponse):
    """Review with the reviewer's username, used inside book responses."""

    user: ReviewerSummary


class BookSummary(APIModel):
    """Minimal book info embedded in a user's review list."""

    id: int
    title: str
    author: str
    genre: Genre


class ReviewWithBook(ReviewResponse):
    """Review with a summary of the book it targets."""

    book: BookSummary


class UserContent(APIModel):
    """Payload of GET /books/me/content."""

    reviews: list[ReviewWithBook]
