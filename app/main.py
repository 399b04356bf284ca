"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() function returns configured app
   - Easier to test (can create multiple instances)

2. Lifespan Events
   - startup: log configuration, optionally create tables
   - shutdown: dispose of the connection pool

3. Middleware Stack
   - Request logging
   - Rate limiting (slowapi)
   - CORS

4. Exception Handlers
   - Every error leaves the API as {"success": false, "message": ...}
   - Domain errors (app.exceptions) carry their own status codes
   - Validation errors become 400 with per-field messages
   - Anything unexpected is logged and answered with a 500
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.database import create_tables, engine
from app.exceptions import AppError, InvalidInputError, format_validation_errors
from app.middleware import RequestLoggingMiddleware
from app.routers import auth_router, books_router, reviews_router
from app.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    errors: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a JSONResponse in the standard error envelope."""
    content: dict = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.auto_create_tables:
        logger.info("AUTO_CREATE_TABLES is on - creating missing tables")
        create_tables()

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    engine.dispose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Review API

Browse a catalog of books and share one review per book.

### Features
- **Books**: list, filter by author/genre, search, create
- **Reviews**: rate 1-5 with a comment; books keep an average rating and review count
- **Accounts**: sign up and log in to receive a Bearer token

### Authentication
Send `Authorization: Bearer <token>` on endpoints marked as protected.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # Attach the limiter to the app state so it can be accessed by decorators
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    allowed_origins = settings.allowed_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Outermost, so the logged status is the one the client receives
    app.add_middleware(RequestLoggingMiddleware)

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Render domain errors raised by the services."""
        logger.warning(
            f"{request.method} {request.url.path} failed: "
            f"{type(exc).__name__}: {exc.message}"
        )
        errors = exc.errors if isinstance(exc, InvalidInputError) else None
        return error_response(exc.status_code, exc.message, errors, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report request validation failures as 400 InvalidInput."""
        messages = format_validation_errors(exc.errors())
        logger.warning(f"{request.method} {request.url.path} invalid input: {messages}")
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "; ".join(messages) or "Invalid input",
            jsonable_encoder(messages),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Wrap framework HTTP errors (404 route, 405 method) in the envelope."""
        return error_response(
            exc.status_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error for debugging while hiding details from users.
        """
        logger.error(f"Database error: {exc}", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In debug mode the message includes the exception text.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        message = str(exc) if settings.debug else "Server Error"
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(books_router, prefix=settings.api_prefix)
    app.include_router(reviews_router, prefix=settings.api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and healthy.",
    )
    async def health_check() -> dict:
        """Used by load balancers and container orchestrators."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.api_version,
            "environment": settings.environment,
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "default_limit": settings.rate_limit_default,
            },
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn app.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# python -m app.main

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
