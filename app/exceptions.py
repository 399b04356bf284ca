"""
Domain Errors

Services raise these instead of building HTTP responses themselves.
app.main registers one handler for AppError that renders the uniform
error envelope:

    {"success": false, "message": "..."}

Status codes follow the conventions existing clients rely on:
ownership failures answer 401 (not 403) and duplicates answer 400
(not 409).
"""

from collections.abc import Iterable
from typing import Any

from fastapi import status

# Location parts that say where a value came from rather than which field
# it is, including the branch names Pydantic adds for BookCreate | list[BookCreate]
_LOCATION_PREFIXES = ("body", "query", "path", "header")
_UNION_BRANCH_PREFIXES = ("BookCreate", "list[")


def format_validation_errors(errors: Iterable[dict[str, Any]]) -> list[str]:
    """
    Turn Pydantic error dicts into "field: message" strings.

    Example:
        >>> format_validation_errors([{"loc": ("body", "rating"), "msg": "Field required", "type": "missing"}])
        ['rating: Field required']
    """
    messages = []
    for error in errors:
        loc = [
            str(part)
            for part in error.get("loc", ())
            if part not in _LOCATION_PREFIXES
            and not str(part).startswith(_UNION_BRANCH_PREFIXES)
        ]
        msg = error.get("msg", "Invalid value")
        if error.get("type") == "value_error":
            msg = msg.removeprefix("Value error, ")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


class AppError(Exception):
    """Base class for errors that map to a client-facing HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class InvalidInputError(AppError):
    """Missing or malformed fields, failed validation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"

    def __init__(self, message: str | None = None, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        if message is None and self.errors:
            message = "; ".join(self.errors)
        super().__init__(message)


class UnauthenticatedError(AppError):
    """Missing/bad session token or bad login credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    """Authenticated, but not the owner of the resource."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to modify this resource"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    """Duplicate account or duplicate review."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"
