"""
Reviews Service (Review Ledger)

Creates, updates and deletes reviews. Every mutation follows the same
shape:

    1. check existence / ownership
    2. write the review row
    3. recalculate the book's rating statistics (app.services.ratings)
    4. commit once

Any error in steps 2-4 rolls the whole unit back, so a book's stored
statistics never disagree with its committed reviews.

Uniqueness of (user, book) is left to the database constraint: the insert
is attempted directly. When it fails and a review by that user for that
book is then visible, the failure becomes ConflictError; any other
integrity error is re-raised. A read-then-insert check would let two
concurrent requests both pass.
"""

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    format_validation_errors,
)
from app.models import Book
from app.models.review import Review
from app.schemas.review import ReviewUpdate
from app.services.ratings import recalculate_book_rating

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this book"
UPDATABLE_FIELDS = ("rating", "comment")


def get_review_or_404(db: Session, review_id: int) -> Review:
    """Get a review by ID, or raise NotFoundError."""
    review = db.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    return review


def review_exists(db: Session, book_id: int, user_id: int) -> bool:
    stmt = select(Review.id).where(Review.book_id == book_id, Review.user_id == user_id)
    return db.execute(stmt).first() is not None


def _commit_with_rollback(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def create_review(
    db: Session,
    book_id: int,
    user_id: int,
    rating: int,
    comment: str,
) -> Review:
    """
    Create a review and update the book's statistics.

    Args:
        db: Database session
        book_id: ID of the book being reviewed
        user_id: ID of the reviewing user
        rating: 1-5 stars
        comment: Review text

    Returns:
        The persisted review

    Raises:
        NotFoundError: If the book does not exist
        ConflictError: If this user already reviewed this book
    """
    if db.execute(select(Book.id).where(Book.id == book_id)).first() is None:
        raise NotFoundError("Book not found")

    review = Review(book_id=book_id, user_id=user_id, rating=rating, comment=comment)
    db.add(review)

    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        if not review_exists(db, book_id, user_id):
            raise
        logger.info(f"Duplicate review rejected: user={user_id} book={book_id}")
        raise ConflictError(DUPLICATE_REVIEW_MESSAGE)

    try:
        recalculate_book_rating(db, book_id)
    except Exception:
        db.rollback()
        raise

    _commit_with_rollback(db)
    db.refresh(review)

    logger.info(f"Review {review.id} created: user={user_id} book={book_id} rating={rating}")
    return review


def update_review(
    db: Session,
    review_id: int,
    caller_id: int,
    fields: Any,
) -> Review:
    """
    Update a review owned by the caller.

    ``fields`` is the raw request payload. It is validated against
    ReviewUpdate only after the review is found and the caller is known to
    own it, so a non-owner is refused whatever they sent. Only rating and
    comment can change; keys that were not sent or are null are ignored.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the caller does not own the review
        InvalidInputError: If the payload fails validation
    """
    review = get_review_or_404(db, review_id)

    if review.user_id != caller_id:
        raise ForbiddenError("Not authorized to update this review")

    try:
        changes = ReviewUpdate.model_validate(fields).model_dump(exclude_unset=True)
    except ValidationError as e:
        raise InvalidInputError(errors=format_validation_errors(e.errors()))

    for field in UPDATABLE_FIELDS:
        value = changes.get(field)
        if value is not None:
            setattr(review, field, value)

    try:
        recalculate_book_rating(db, review.book_id)
    except Exception:
        db.rollback()
        raise

    _commit_with_rollback(db)
    db.refresh(review)

    logger.info(f"Review {review.id} updated by user {caller_id}")
    return review


def delete_review(db: Session, review_id: int, caller_id: int) -> None:
    """
    Delete a review owned by the caller.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the caller does not own the review
    """
    review = get_review_or_404(db, review_id)

    if review.user_id != caller_id:
        raise ForbiddenError("Not authorized to delete this review")

    book_id = review.book_id
    db.delete(review)

    try:
        recalculate_book_rating(db, book_id)
    except Exception:
        db.rollback()
        raise

    _commit_with_rollback(db)

    logger.info(f"Review {review_id} deleted by user {caller_id}")
