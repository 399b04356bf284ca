"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Common Dependency Patterns used here:
- Database sessions (per-request)
- Authentication (resolve the Bearer token to a user)
- Pagination parameters
- Book list filters
"""

from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Genre, User
from app.services.accounts import resolve_token_user

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def get_books(db: Session = Depends(get_db)):
#
# You can write:
#   def get_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - limit: How many items per page
    - skip: Calculated offset for database query

    Usage in route:
        @router.get("/books")
        def get_books(db: DbSession, pagination: Pagination): ...
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        limit: int = Query(
            default=10,
            ge=1,
            le=100,  # Limit to prevent abuse
            description="Number of items per page (max 100)",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        """Number of records to skip: (page - 1) * limit."""
        return (self.page - 1) * self.limit


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Book List Filters
# =============================================================================
class BookListParams:
    """
    Filter parameters for GET /books.

    Usage:
        GET /api/books?author=herbert&genre=Science%20Fiction
    """

    def __init__(
        self,
        author: str | None = Query(
            default=None,
            max_length=100,
            description="Filter by author name (partial match, case-insensitive)",
            examples=["herbert", "austen"],
        ),
        genre: Genre | None = Query(
            default=None,
            description="Filter by genre (exact match)",
            examples=["Science Fiction"],
        ),
    ) -> None:
        self.author = author
        self.genre = genre


BookFilters = Annotated[BookListParams, Depends()]


# =============================================================================
# Session Token Authentication
# =============================================================================
# HTTPBearer extracts the token from "Authorization: Bearer <token>" and adds
# the "Authorize" button to Swagger UI. auto_error is off so a missing header
# goes through resolve_token_user and gets the same 401 envelope as a bad one.

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Resolve the Bearer token on the request to a User.

    Raises:
        UnauthenticatedError: If the token is missing, invalid or expired,
            or the user no longer exists (rendered as 401)
    """
    token = credentials.credentials if credentials else None
    return resolve_token_user(db, token)


CurrentUser = Annotated[User, Depends(get_current_user)]
