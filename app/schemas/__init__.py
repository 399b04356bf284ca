"""
Pydantic Schemas Package

Request/response models, kept separate from the SQLAlchemy models so the
API controls exactly what it exposes (password hashes never leave the
service) and can validate input before anything touches the database.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from app.schemas.book import (
    BookCreate,
    BookDetail,
    BookResponse,
    BookStatistics,
    BookWithReviews,
    ReviewPage,
)
from app.schemas.common import (
    APIModel,
    DataResponse,
    ErrorResponse,
    ListResponse,
    PaginatedResponse,
    PaginationMeta,
)
from app.schemas.review import (
    BookSummary,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    ReviewWithBook,
    ReviewWithUser,
    UserContent,
)
from app.schemas.user import (
    AuthPayload,
    LoginRequest,
    ReviewerSummary,
    SignupRequest,
    UserResponse,
)

__all__ = [
    # Envelope schemas
    "APIModel",
    "DataResponse",
    "ErrorResponse",
    "ListResponse",
    "PaginatedResponse",
    "PaginationMeta",
    # Book schemas
    "BookCreate",
    "BookDetail",
    "BookResponse",
    "BookStatistics",
    "BookWithReviews",
    "ReviewPage",
    # Review schemas
    "BookSummary",
    "ReviewCreate",
    "ReviewResponse",
    "ReviewUpdate",
    "ReviewWithBook",
    "ReviewWithUser",
    "UserContent",
    # User/auth schemas
    "AuthPayload",
    "LoginRequest",
    "ReviewerSummary",
    "SignupRequest",
    "UserResponse",
]
