"""
SQLAlchemy Models Package

Model Relationships:
- User -> Review: One-to-Many (a user writes many reviews)
- Book -> Review: One-to-Many (a book receives many reviews)
- (User, Book) is unique across reviews

Import all models here so Alembic discovers them for migrations and the
rest of the app has a single import point.
"""

from app.models.user import User
from app.models.book import Book, Genre
from app.models.review import Review

__all__ = [
    "User",
    "Book",
    "Genre",
    "Review",
]
