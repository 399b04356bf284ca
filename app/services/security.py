"""
Security Service

Handles password hashing and session token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib), cost factor from BCRYPT_ROUNDS
2. Signed, time-boxed session tokens (HS256 JWT via python-jose)
3. Tokens carry only the user id (sub) plus issue/expiry times

Usage:
    from app.services.security import hash_password, verify_password

    hashed = hash_password("secret1")
    is_valid = verify_password("secret1", hashed)
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# - deprecated: "auto" means old hashes are automatically flagged for upgrade
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt (salted, one-way).

    Example:
        >>> hashed = hash_password("secret1")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a stored bcrypt hash.

    Uses constant-time comparison to prevent timing attacks.
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# Session Token Configuration
# -------------------------------------------------------------------------

ALGORITHM = "HS256"


def create_access_token(
    user_id: int,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token for a user.

    Args:
        user_id: ID of the authenticated user (stored as the "sub" claim)
        expires_delta: Optional custom lifetime, defaults to
            ACCESS_TOKEN_EXPIRE_HOURS

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.access_token_expire_hours)

    to_encode = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a session token.

    python-jose checks the signature and the exp claim.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def get_token_subject(token: str) -> int | None:
    """Return the user id a valid token was issued for, else None."""
    payload = decode_token(token)
    if payload is None:
        return None

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        logger.warning("Token has no usable subject claim")
        return None
