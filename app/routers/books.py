"""
Books Router

Endpoints:
- GET  /books                  - List books (filters, pagination, nested reviews)
- GET  /books/search?query=    - Substring search on title/author (unpaginated)
- GET  /books/me/content       - The caller's own reviews (authenticated)
- GET  /books/{book_id}        - Book detail with statistics and paged reviews
- POST /books                  - Create one book, or many from a JSON array (authenticated)
- POST /books/{book_id}/reviews - Review a book (authenticated)

Static paths (/search, /me/content) are declared before /{book_id} so
they are matched first.
"""

from fastapi import APIRouter, Query, Request, status

from app.config import get_settings
from app.dependencies import BookFilters, CurrentUser, DbSession, Pagination
from app.schemas import (
    BookCreate,
    BookDetail,
    BookResponse,
    BookWithReviews,
    DataResponse,
    ErrorResponse,
    ListResponse,
    PaginatedResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewWithBook,
    UserContent,
)
from app.services import catalog, reviews
from app.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)


@router.get(
    "",
    response_model=PaginatedResponse[list[BookWithReviews]],
    summary="List books",
    description="Paginated list of books, filterable by author (partial match) and genre.",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    filters: BookFilters,
) -> PaginatedResponse[list[BookWithReviews]]:
    """
    List books with pagination and optional filtering.

    Each book includes its reviews with the reviewer's username.

    Examples:
        GET /api/books?page=2&limit=5
        GET /api/books?author=herbert&genre=Science%20Fiction
    """
    books, meta = catalog.list_books(
        db,
        page=pagination.page,
        limit=pagination.limit,
        author=filters.author,
        genre=filters.genre,
    )
    return PaginatedResponse(
        pagination=meta,
        data=[BookWithReviews.model_validate(book) for book in books],
    )


@router.get(
    "/search",
    response_model=ListResponse[BookResponse],
    summary="Search books",
    description="Case-insensitive substring search on title or author. Returns every match.",
    responses={400: {"model": ErrorResponse, "description": "Missing search query"}},
)
@limiter.limit(settings.rate_limit_default)
def search_books(
    request: Request,
    db: DbSession,
    query: str | None = Query(
        default=None,
        max_length=100,
        description="Search text",
        examples=["dune", "herbert"],
    ),
) -> ListResponse[BookResponse]:
    """Search books by title or author."""
    books = catalog.search_books(db, query)
    return ListResponse(
        count=len(books),
        data=[BookResponse.model_validate(book) for book in books],
    )


@router.get(
    "/me/content",
    response_model=PaginatedResponse[UserContent],
    summary="My reviews",
    description="The authenticated user's reviews, most recent first, with book summaries.",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
@limiter.limit(settings.rate_limit_default)
def get_user_content(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    current_user: CurrentUser,
) -> PaginatedResponse[UserContent]:
    """Return the caller's reviews, paginated."""
    user_reviews, meta = catalog.get_user_content(
        db,
        user_id=current_user.id,
        page=pagination.page,
        limit=pagination.limit,
    )
    return PaginatedResponse(
        pagination=meta,
        data=UserContent(
            reviews=[ReviewWithBook.model_validate(review) for review in user_reviews],
        ),
    )


@router.get(
    "/{book_id}",
    response_model=DataResponse[BookDetail],
    summary="Get a book by ID",
    description="Book details, rating statistics computed from live reviews, and a page of reviews.",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: int,
    db: DbSession,
    pagination: Pagination,
) -> DataResponse[BookDetail]:
    """
    Get a single book by its ID.

    page/limit paginate the book's reviews (most recent first).
    """
    detail = catalog.get_book_detail(
        db,
        book_id=book_id,
        page=pagination.page,
        limit=pagination.limit,
    )
    return DataResponse(data=detail)


@router.post(
    "",
    response_model=DataResponse[BookResponse] | ListResponse[BookResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create book(s)",
    description="Create a single book from an object, or several from an array. Requires authentication.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid book data"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
@limiter.limit(settings.rate_limit_write)
def create_books(
    request: Request,
    payload: BookCreate | list[BookCreate],
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[BookResponse] | ListResponse[BookResponse]:
    """
    Create one or more books.

    An array body is all-or-nothing: if any entry is invalid, nothing is
    created.
    """
    if isinstance(payload, list):
        books = catalog.create_books(db, payload)
        return ListResponse(
            count=len(books),
            data=[BookResponse.model_validate(book) for book in books],
        )

    (book,) = catalog.create_books(db, [payload])
    return DataResponse(data=BookResponse.model_validate(book))


@router.post(
    "/{book_id}/reviews",
    response_model=DataResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Review a book. One review per book per user. Requires authentication.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid review or already reviewed"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[ReviewResponse]:
    """Create a review and update the book's rating statistics."""
    review = reviews.create_review(
        db,
        book_id=book_id,
        user_id=current_user.id,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    return DataResponse(data=ReviewResponse.model_validate(review))
