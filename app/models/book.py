"""
Book Model

The central model of the catalog.

average_rating and total_reviews are DERIVED fields: they are a
denormalized copy of the mean and count of the book's reviews, kept in
step by app.services.ratings inside the same transaction as every review
write. Listing endpoints read them directly instead of running AVG/COUNT
per book.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    Enum as SAEnum,
    Float,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.review import Review


class Genre(str, Enum):
    """Closed set of genres a book can belong to."""

    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    SCIENCE_FICTION = "Science Fiction"
    FANTASY = "Fantasy"
    MYSTERY = "Mystery"
    THRILLER = "Thriller"
    ROMANCE = "Romance"
    OTHER = "Other"


class Book(Base):
    """
    Book model representing catalog entries.

    Table: books

    Fields:
    - title: Book title (max 100 chars)
    - author: Author name, free text
    - genre: One of the Genre values
    - description: Summary (max 500 chars)
    - published_year: Year of publication
    - average_rating: Mean review rating, one decimal, 0 when unreviewed
    - total_reviews: Number of reviews

    Example:
        book = Book(
            title="Dune",
            author="Frank Herbert",
            genre=Genre.SCIENCE_FICTION,
            description="Desert planet politics.",
            published_year=1965,
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name"
    )

    # Stored as the enum *value* ("Science Fiction"), not the member name
    genre: Mapped[Genre] = mapped_column(
        SAEnum(
            Genre,
            name="book_genre",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        index=True,
        nullable=False,
        comment="Closed genre enumeration"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    published_year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Year of publication"
    )

    # -------------------------------------------------------------------------
    # Derived Rating Fields
    # -------------------------------------------------------------------------
    average_rating: Mapped[float] = mapped_column(
        Float,
        default=0,
        server_default="0",
        nullable=False,
        comment="Mean review rating (0-5, one decimal), 0 if no reviews"
    )

    total_reviews: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Number of reviews for this book"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author='{self.author}')"
