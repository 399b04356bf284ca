"""
Ratings Service (Rating Aggregator)

Maintains the denormalized rating fields on the Book model:
- average_rating: mean of all review ratings, one decimal, 0 when none
- total_reviews: number of reviews

The review service calls recalculate_book_rating() after every create,
update and delete, inside the same transaction as the review write. This
module never commits: if the caller rolls back, the statistics roll back
with the review change.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from app.models import Book
from app.models.review import Review
from app.schemas.book import BookStatistics

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def round_rating(value: float | Decimal | None) -> float:
    """
    Round an average rating to one decimal place, halves rounding up.

    None (AVG over zero rows) becomes 0.

    Example:
        >>> round_rating(4.25)
        4.3
        >>> round_rating(None)
        0.0
    """
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def compute_book_statistics(db: Session, book_id: int) -> BookStatistics:
    """
    Compute a book's rating statistics from its review rows.

    Read-only; used directly by the book detail endpoint and by
    recalculate_book_rating().
    """
    stmt = select(
        func.avg(Review.rating),
        func.count(Review.id),
    ).where(Review.book_id == book_id)

    avg_rating, review_count = db.execute(stmt).one()

    return BookStatistics(
        average_rating=round_rating(avg_rating),
        total_reviews=review_count or 0,
    )


def lock_book_statement(book_id: int) -> Select:
    """
    SELECT a book row locked until the end of the transaction.

    Concurrent recalculations for the same book queue on this lock, so the
    last writer aggregates over every committed review. FOR NO KEY UPDATE
    is used on PostgreSQL because a plain FOR UPDATE conflicts with the
    FOR KEY SHARE lock the review foreign key check already holds on the
    book row. Dialects without row locks (SQLite) ignore the clause.
    """
    return (
        select(Book)
        .where(Book.id == book_id)
        .with_for_update(key_share=True)
        .execution_options(populate_existing=True)
    )


def recalculate_book_rating(db: Session, book_id: int) -> BookStatistics | None:
    """
    Recalculate and store a book's rating aggregations.

    Called after any review create/update/delete. Pending review changes
    are flushed first so the aggregate sees them, then the book row is
    locked before the reviews are aggregated.

    Args:
        db: Database session (the caller owns the transaction)
        book_id: ID of the book to update

    Returns:
        The new statistics, or None if the book does not exist
    """
    db.flush()

    book = db.execute(lock_book_statement(book_id)).scalar_one_or_none()
    if book is None:
        logger.warning(f"Rating recalculation skipped: book {book_id} not found")
        return None

    stats = compute_book_statistics(db, book_id)
    book.average_rating = stats.average_rating
    book.total_reviews = stats.total_reviews
    db.flush()

    logger.debug(
        f"Book {book_id} statistics: average={stats.average_rating} "
        f"total={stats.total_reviews}"
    )
    return stats


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate rating aggregations for all books and commit.

    Useful for data migrations or repairing drift after manual edits.

    Returns:
        Number of books updated
    """
    book_ids = db.execute(select(Book.id)).scalars().all()

    try:
        for book_id in book_ids:
            recalculate_book_rating(db, book_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Recalculated ratings for {len(book_ids)} books")
    return len(book_ids)
