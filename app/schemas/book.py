"""
Book Pydantic Schemas

Schemas:
- BookCreate: Fields required to add a book to the catalog
- BookResponse: Book with its stored rating statistics
- BookWithReviews: Book plus its reviews (list endpoint)
- BookStatistics: averageRating/totalReviews pair
- BookDetail: Book, freshly computed statistics, and a page of reviews
"""

from datetime import datetime

from pydantic import Field, field_validator

from app.models.book import Genre
from app.schemas.common import APIModel, PaginationMeta
from app.schemas.review import ReviewWithUser


class BookCreate(APIModel):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "description": "Politics and prophecy on a desert planet.",
        "publishedYear": 1965
    }
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Book title (max 100 characters)",
        examples=["Dune"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["Frank Herbert"],
    )

    genre: Genre = Field(
        ...,
        description="One of: " + ", ".join(g.value for g in Genre),
        examples=["Science Fiction"],
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book description (max 500 characters)",
    )

    published_year: int = Field(
        ...,
        ge=0,
        le=9999,
        description="Year of publication",
        examples=[1965],
    )

    @field_validator("title", "author", "description")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Validate and normalize required text fields."""
        if not v.strip():
            raise ValueError("Field cannot be empty or whitespace")
        return v.strip()


class BookResponse(APIModel):
    """Book as stored, including the denormalized rating fields."""

    id: int = Field(..., description="Unique identifier")
    title: str
    author: str
    genre: Genre
    description: str
    published_year: int
    average_rating: float = Field(
        default=0,
        description="Mean review rating (0-5, one decimal), 0 if no reviews",
    )
    total_reviews: int = Field(
        default=0,
        description="Number of reviews for this book",
    )
    created_at: datetime
    updated_at: datetime


class BookWithReviews(BookResponse):
    """Book plus every review of it, each with the reviewer's username."""

    reviews: list[ReviewWithUser] = Field(default=[])


class BookStatistics(APIModel):
    """Aggregate rating statistics for a book."""

    average_rating: float = Field(..., ge=0, le=5)
    total_reviews: int = Field(..., ge=0)


class ReviewPage(APIModel):
    """One page of a book's reviews."""

    pagination: PaginationMeta
    data: list[ReviewWithUser]


class BookDetail(BookResponse):
    """
    Response of GET /books/{id}.

    statistics is recomputed from the review rows at read time,
    independently of the stored average_rating/total_reviews.
    """

    statistics: BookStatistics
    reviews: ReviewPage
