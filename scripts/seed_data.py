#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

    # Keep existing rows and only add the sample data
    python scripts/seed_data.py --keep

This script:
1. Connects to the database using app settings
2. Clears existing data (unless --keep)
3. Creates sample users and books
4. Adds reviews through the review service, so every book's
   averageRating/totalReviews are computed the same way the API does it

Every seeded user has the password "password123".
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.database import SessionLocal, create_tables
from app.models import Book, Genre, Review, User
from app.schemas import BookCreate
from app.services import catalog, reviews
from app.services.security import hash_password

SEED_PASSWORD = "password123"


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Review))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_users(db: Session) -> dict[str, User]:
    """Create sample users."""
    print("Creating users...")
    usernames = ["alice", "bob", "carol"]

    users = {}
    for username in usernames:
        user = User(
            username=username,
            email=f"{username}@example.com",
            hashed_password=hash_password(SEED_PASSWORD),
        )
        db.add(user)
        users[username] = user

    db.commit()
    print(f"Created {len(users)} users.")
    return users


def create_books(db: Session) -> dict[str, Book]:
    """Create sample books."""
    print("Creating books...")
    books_data = [
        {
            "title": "Dune",
            "author": "Frank Herbert",
            "genre": Genre.SCIENCE_FICTION,
            "description": "Politics, religion and ecology on the desert planet Arrakis.",
            "published_year": 1965,
        },
        {
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "genre": Genre.FANTASY,
            "description": "Bilbo Baggins is swept into a quest to reclaim a dwarf kingdom.",
            "published_year": 1937,
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "genre": Genre.ROMANCE,
            "description": "Elizabeth Bennet and Mr. Darcy overcome first impressions.",
            "published_year": 1813,
        },
        {
            "title": "Murder on the Orient Express",
            "author": "Agatha Christie",
            "genre": Genre.MYSTERY,
            "description": "Hercule Poirot investigates a murder aboard a snowbound train.",
            "published_year": 1934,
        },
        {
            "title": "Sapiens",
            "author": "Yuval Noah Harari",
            "genre": Genre.NON_FICTION,
            "description": "A brief history of humankind.",
            "published_year": 2011,
        },
        {
            "title": "The Girl with the Dragon Tattoo",
            "author": "Stieg Larsson",
            "genre": Genre.THRILLER,
            "description": "A journalist and a hacker dig into a decades-old disappearance.",
            "published_year": 2005,
        },
    ]

    created = catalog.create_books(db, [BookCreate(**data) for data in books_data])
    books = {book.title: book for book in created}
    print(f"Created {len(books)} books.")
    return books


def create_reviews(db: Session, users: dict[str, User], books: dict[str, Book]) -> int:
    """Create sample reviews through the review service."""
    print("Creating reviews...")
    reviews_data = [
        ("alice", "Dune", 5, "A masterpiece of world-building."),
        ("bob", "Dune", 4, "Slow start, brilliant ending."),
        ("carol", "Dune", 4, "The appendices alone are worth it."),
        ("alice", "The Hobbit", 5, "Still charming on every reread."),
        ("bob", "Pride and Prejudice", 3, "Witty, if a little long."),
        ("carol", "Murder on the Orient Express", 5, "That ending!"),
        ("alice", "Sapiens", 4, "Big ideas, easy to read."),
    ]

    for username, title, rating, comment in reviews_data:
        reviews.create_review(
            db,
            book_id=books[title].id,
            user_id=users[username].id,
            rating=rating,
            comment=comment,
        )

    print(f"Created {len(reviews_data)} reviews.")
    return len(reviews_data)


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    # Create session
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        users = create_users(db)
        books = create_books(db)
        review_count = create_reviews(db, users, books)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)} (password: {SEED_PASSWORD})")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {review_count}")
        print("\nYou can now access the API at http://localhost:7000/api/books")
        print("API documentation at http://localhost:7000/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the database with sample data")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing rows instead of clearing them first",
    )
    args = parser.parse_args()

    seed_database(clear_existing=not args.keep)
