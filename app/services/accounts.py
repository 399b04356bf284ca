"""
Accounts Service (Credential Store)

Creates users, checks credentials and resolves session tokens to users.

Passwords are hashed explicitly in signup() and change_password() before
anything is written; the User model never hashes on its own.
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, UnauthenticatedError
from app.models.user import User
from app.services.security import (
    create_access_token,
    get_token_subject,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

DUPLICATE_ACCOUNT_MESSAGE = "User with this email or username already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


def signup(
    db: Session,
    username: str,
    email: str,
    password: str,
) -> tuple[User, str]:
    """
    Register a new user and issue a session token.

    Args:
        db: Database session
        username: Requested username (must be unique)
        email: Email address (must be unique)
        password: Plain text password, hashed before storage

    Returns:
        Tuple of (user, token)

    Raises:
        ConflictError: If the email or username is already taken
    """
    stmt = select(User.id).where(or_(User.email == email, User.username == username))
    if db.execute(stmt).first() is not None:
        raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE)

    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
    )
    db.add(user)

    # The unique indexes still guard against a concurrent signup that
    # passed the check above
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE)

    db.refresh(user)
    logger.info(f"New user registered: id={user.id} username={user.username}")

    return user, create_access_token(user.id)


def login(db: Session, email: str, password: str) -> tuple[User, str]:
    """
    Authenticate with email and password.

    Unknown email and wrong password produce the same error so the
    response does not reveal which accounts exist.

    Raises:
        UnauthenticatedError: If the credentials do not match
    """
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    if user is None:
        logger.warning("Login failed: unknown email")
        raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)

    if not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed: incorrect password for user id={user.id}")
        raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)

    logger.info(f"User logged in: id={user.id}")

    return user, create_access_token(user.id)


def change_password(db: Session, user: User, new_password: str) -> bool:
    """
    Rotate a user's password.

    Re-hashes only when the new password differs from the current one.

    Returns:
        True if the stored hash changed, False if the password was the same
    """
    if verify_password(new_password, user.hashed_password):
        return False

    user.hashed_password = hash_password(new_password)
    db.commit()
    logger.info(f"Password changed for user id={user.id}")
    return True


def resolve_token_user(db: Session, token: str | None) -> User:
    """
    Return the user a session token belongs to.

    Raises:
        UnauthenticatedError: If the token is missing, invalid or expired,
            or the user no longer exists
    """
    if not token:
        raise UnauthenticatedError()

    user_id = get_token_subject(token)
    if user_id is None:
        raise UnauthenticatedError()

    user = db.get(User, user_id)
    if user is None:
        raise UnauthenticatedError("User no longer exists")

    return user
