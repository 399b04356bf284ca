"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Book Review API.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Services run every statement of the request in that session
3. Services commit once on success, roll back on failure
4. Close session when request ends

A review mutation and the book statistics it affects are therefore written
in one transaction: either both land or neither does.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# - pool_pre_ping: Test connection health before using (prevents stale connections)
# - echo: Log all SQL statements in debug mode
# SQLite (local dev) does not take pool sizing arguments and needs
# check_same_thread disabled because FastAPI runs sync routes in a threadpool.

engine_options: dict = {
    "pool_pre_ping": True,
    "echo": settings.debug,
}
if settings.is_sqlite:
    engine_options["connect_args"] = {"check_same_thread": False}
else:
    engine_options["pool_size"] = settings.db_pool_size
    engine_options["max_overflow"] = settings.db_max_overflow

engine = create_engine(settings.database_url, **engine_options)


# =============================================================================
# Session Factory
# =============================================================================
# - autoflush=False: Don't auto-flush before queries (more predictable behavior)
# - expire_on_commit stays on so objects reload their committed state

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic reads Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Yields one session per request and always closes it, even when the
    handler raised. Closing a session with an open transaction rolls it
    back, so an unhandled error never leaves half a write behind.

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    Used by AUTO_CREATE_TABLES on startup and by the seed script.
    In production, use Alembic migrations instead.
    """
    # Import models so every table is registered on Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Development and testing only.
    """
    import app.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
