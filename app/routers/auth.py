"""
Authentication Router

Handles user authentication endpoints:
- Signup (username/email/password → account + session token)
- Login (email/password → session token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged, stored or echoed back
- Session tokens are signed JWTs valid for ACCESS_TOKEN_EXPIRE_HOURS
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import DbSession
from app.schemas import (
    AuthPayload,
    DataResponse,
    ErrorResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
)
from app.services import accounts
from app.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or account already exists"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)


@router.post(
    "/signup",
    response_model=DataResponse[AuthPayload],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new account and receive a session token.

    **Requirements:**
    - username: 3-30 characters, unique
    - email: valid address, unique
    - password: 6-100 characters
    """,
)
@limiter.limit(settings.rate_limit_auth)
def signup(
    request: Request,
    user_data: SignupRequest,
    db: DbSession,
) -> DataResponse[AuthPayload]:
    """Register a new user and return the user with a session token."""
    user, token = accounts.signup(
        db,
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
    )
    return DataResponse(
        data=AuthPayload(token=token, user=UserResponse.model_validate(user)),
    )


@router.post(
    "/login",
    response_model=DataResponse[AuthPayload],
    summary="Login with email and password",
    description="""
    Authenticate with email and password to receive a session token.

    **Usage:**
    Include the token in the Authorization header:
    ```
    Authorization: Bearer <token>
    ```
    """,
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    credentials: LoginRequest,
    db: DbSession,
) -> DataResponse[AuthPayload]:
    """Authenticate and return the user with a session token."""
    user, token = accounts.login(db, email=credentials.email, password=credentials.password)
    return DataResponse(
        data=AuthPayload(token=token, user=UserResponse.model_validate(user)),
    )
