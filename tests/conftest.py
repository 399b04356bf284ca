"""
pytest Fixtures for Book Review API Tests

This file contains shared fixtures used across all test files.

WHAT ARE FIXTURES?
==================
Fixtures are reusable test setup/teardown functions.
They provide:
- Test data (sample users, books, reviews)
- Test resources (database connections, HTTP clients)
- Setup/cleanup logic (create/drop tables)

DATABASE ISOLATION:
===================
Each test gets its own in-memory SQLite database. The services commit and
roll back on their own, so wrapping a test in an outer transaction would
not isolate it; a fresh database per test does.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting and sets a test secret key
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
# Lowest cost bcrypt allows, hashing is otherwise the slowest part of the suite
os.environ["BCRYPT_ROUNDS"] = "4"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Book, Genre, Review, User
from app.services import reviews
from app.services.security import create_access_token, hash_password

TEST_PASSWORD = "password123"


def get_auth_header(user: User) -> dict:
    """Create an Authorization header carrying a session token for a user."""
    token = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def engine():
    """
    Create a SQLite in-memory database engine for one test.

    StaticPool keeps a single connection alive for the engine's lifetime.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Database session shared by the test and the API under test."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


def make_user(db: Session, username: str) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=hash_password(TEST_PASSWORD),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    return make_user(db_session, "testuser")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user(db_session, "seconduser")


@pytest.fixture
def make_reviewer(db_session: Session):
    """Factory for extra users, e.g. when a book needs several reviews."""
    return lambda username: make_user(db_session, username)


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    """Create a sample book with no reviews."""
    book = Book(
        title="Dune",
        author="Frank Herbert",
        genre=Genre.SCIENCE_FICTION,
        description="Politics, religion and ecology on the desert planet Arrakis.",
        published_year=1965,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session) -> list[Book]:
    """
    Create 15 books for pagination and filter testing.

    Authors rotate Frank Herbert / Ursula K. Le Guin / Agatha Christie
    (i % 3); even-numbered books are Science Fiction, odd ones Mystery.
    """
    authors = ["Frank Herbert", "Ursula K. Le Guin", "Agatha Christie"]
    books = []
    for i in range(15):  # More than default page size
        book = Book(
            title=f"Test Book {i + 1}",
            author=authors[i % 3],
            genre=Genre.SCIENCE_FICTION if i % 2 == 0 else Genre.MYSTERY,
            description=f"Description for book {i + 1}",
            published_year=1950 + i,
        )
        books.append(book)
        db_session.add(book)

    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


@pytest.fixture
def sample_review(
    db_session: Session,
    sample_book: Book,
    sample_user: User,
) -> Review:
    """Create a 4-star review by sample_user, with the book's statistics updated."""
    return reviews.create_review(
        db_session,
        book_id=sample_book.id,
        user_id=sample_user.id,
        rating=4,
        comment="Great book!",
    )
