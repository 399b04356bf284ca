#!/usr/bin/env python3
"""
Rating Recalculation Script

Recomputes averageRating and totalReviews for books from their review
rows. Use it after bulk imports or manual edits to the reviews table.

Usage:
    # From project root with venv activated:
    python scripts/recalculate_ratings.py

    # Only some books:
    python scripts/recalculate_ratings.py --book-id 3 --book-id 7
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.database import SessionLocal
from app.services.ratings import recalculate_all_book_ratings, recalculate_book_rating

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def recalculate(book_ids: list[int] | None = None) -> int:
    """
    Recalculate stored rating statistics.

    Args:
        book_ids: Books to fix; every book when None

    Returns:
        Number of books updated
    """
    db = SessionLocal()

    try:
        if not book_ids:
            return recalculate_all_book_ratings(db)

        updated = 0
        for book_id in book_ids:
            stats = recalculate_book_rating(db, book_id)
            if stats is None:
                continue
            logger.info(
                f"Book {book_id}: average={stats.average_rating} "
                f"total={stats.total_reviews}"
            )
            updated += 1

        db.commit()
        return updated

    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Recalculate book rating statistics from reviews"
    )
    parser.add_argument(
        "--book-id",
        type=int,
        action="append",
        dest="book_ids",
        help="Only recalculate this book (repeatable)"
    )

    args = parser.parse_args()

    updated = recalculate(args.book_ids)
    logger.info(f"Done: {updated} book(s) updated")


if __name__ == "__main__":
    main()
