"""
User Pydantic Schemas

Schemas:
- SignupRequest: Registration data (username, email, password)
- LoginRequest: Credentials for login
- UserResponse: Public account data (never exposes the password)
- AuthPayload: Session token plus the user it belongs to
- ReviewerSummary: Minimal user info embedded in review responses
"""

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import APIModel


class SignupRequest(APIModel):
    """
    Schema for user registration.

    Example request body:
    {
        "username": "alice",
        "email": "alice@example.com",
        "password": "secret1"
    }
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        description="Unique username (3-30 characters)",
        examples=["alice"],
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["alice@example.com"],
    )

    password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="Password (6-100 characters)",
        examples=["secret1"],
    )

    @field_validator("username")
    @classmethod
    def username_must_not_be_blank(cls, v: str) -> str:
        """Strip surrounding whitespace; reject blank usernames."""
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be between 3 and 30 characters")
        return v


class LoginRequest(APIModel):
    """Schema for login with email and password."""

    email: EmailStr = Field(..., description="Registered email address")
    password: str = Field(..., min_length=1, description="Account password")


class UserResponse(APIModel):
    """
    Schema for user responses.

    SECURITY: Never includes the password hash.
    """

    id: int = Field(..., description="Unique user identifier")
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="User's email address")


class AuthPayload(APIModel):
    """Returned by signup and login."""

    token: str = Field(..., description="Signed session token (Bearer)")
    user: UserResponse


class ReviewerSummary(APIModel):
    """Author identity embedded in review listings."""

    id: int
    username: str
