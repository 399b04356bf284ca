"""
Catalog Service (Catalog Query Service)

Read paths over books and reviews, plus book creation.

Listing reads the stored average_rating/total_reviews columns; only the
book detail view recomputes statistics from the review rows.
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from app.exceptions import InvalidInputError, NotFoundError
from app.models import Book, Genre
from app.models.review import Review
from app.schemas.book import (
    BookCreate,
    BookDetail,
    BookResponse,
    ReviewPage,
)
from app.schemas.common import PaginationMeta
from app.schemas.review import ReviewWithUser
from app.services.ratings import compute_book_statistics

logger = logging.getLogger(__name__)


def offset_for(page: int, limit: int) -> int:
    """
    Calculate the number of records to skip.

    Page 1 → skip 0, page 2 → skip limit, page 3 → skip 2 * limit.
    """
    return (page - 1) * limit


def _count(db: Session, stmt) -> int:
    count_stmt = select(func.count()).select_from(stmt.subquery())
    return db.execute(count_stmt).scalar() or 0


def get_book_or_404(db: Session, book_id: int) -> Book:
    """Get a book by ID, or raise NotFoundError."""
    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return book


# =============================================================================
# Books
# =============================================================================


def create_books(db: Session, payloads: list[BookCreate]) -> list[Book]:
    """
    Create one or more books in a single transaction.

    Either every book is inserted or none is.
    """
    books = [
        Book(
            title=payload.title,
            author=payload.author,
            genre=payload.genre,
            description=payload.description,
            published_year=payload.published_year,
        )
        for payload in payloads
    ]
    db.add_all(books)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    for book in books:
        db.refresh(book)

    logger.info(f"Created {len(books)} book(s)")
    return books


def list_books(
    db: Session,
    page: int,
    limit: int,
    author: str | None = None,
    genre: Genre | None = None,
) -> tuple[list[Book], PaginationMeta]:
    """
    List books, newest first, with optional filters and their reviews.

    Args:
        db: Database session
        page: 1-indexed page number
        limit: Books per page
        author: Case-insensitive substring match on the author name; % and _
            match literally
        genre: Exact genre match

    Returns:
        Tuple of (books on this page, pagination metadata)
    """
    base_stmt = select(Book)

    if author:
        base_stmt = base_stmt.where(
            func.lower(Book.author).contains(author.lower(), autoescape=True)
        )

    if genre is not None:
        base_stmt = base_stmt.where(Book.genre == genre)

    # The count runs on books alone, so joined reviews never inflate it
    total = _count(db, base_stmt)

    stmt = (
        base_stmt
        .options(selectinload(Book.reviews).selectinload(Review.user))
        .order_by(Book.created_at.desc(), Book.id.desc())
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    books = db.execute(stmt).scalars().all()

    return list(books), PaginationMeta.build(page, limit, total)


def get_book_detail(db: Session, book_id: int, page: int, limit: int) -> BookDetail:
    """
    Get a book with freshly computed statistics and a page of its reviews.

    Reviews are ordered most recent first.

    Raises:
        NotFoundError: If the book does not exist
    """
    book = get_book_or_404(db, book_id)

    reviews_stmt = select(Review).where(Review.book_id == book_id)
    total = _count(db, reviews_stmt)

    reviews = db.execute(
        reviews_stmt
        .options(selectinload(Review.user))
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset(offset_for(page, limit))
        .limit(limit)
    ).scalars().all()

    book_data = BookResponse.model_validate(book).model_dump()
    return BookDetail(
        **book_data,
        statistics=compute_book_statistics(db, book_id),
        reviews=ReviewPage(
            pagination=PaginationMeta.build(page, limit, total),
            data=[ReviewWithUser.model_validate(review) for review in reviews],
        ),
    )


def search_books(db: Session, query: str | None) -> list[Book]:
    """
    Case-insensitive substring search over title and author. LIKE wildcards
    in the query are escaped, so "100%" matches that text literally.

    Returns the full match set (unpaginated).

    Raises:
        InvalidInputError: If the query is missing or blank
    """
    if query is None or not query.strip():
        raise InvalidInputError("Please provide a search query")

    search_term = query.strip().lower()
    stmt = (
        select(Book)
        .where(
            or_(
                func.lower(Book.title).contains(search_term, autoescape=True),
                func.lower(Book.author).contains(search_term, autoescape=True),
            )
        )
        .order_by(Book.title, Book.id)
    )
    return list(db.execute(stmt).scalars().all())


# =============================================================================
# User Content
# =============================================================================


def get_user_content(
    db: Session,
    user_id: int,
    page: int,
    limit: int,
) -> tuple[list[Review], PaginationMeta]:
    """
    List a user's own reviews, most recent first, each with its book loaded.

    Returns:
        Tuple of (reviews on this page, pagination metadata)
    """
    base_stmt = select(Review).where(Review.user_id == user_id)
    total = _count(db, base_stmt)

    reviews = db.execute(
        base_stmt
        .options(selectinload(Review.book))
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset(offset_for(page, limit))
        .limit(limit)
    ).scalars().all()

    return list(reviews), PaginationMeta.build(page, limit, total)
