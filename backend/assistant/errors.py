"""Typed errors for assistant action handling and their HTTP status mapping."""

from typing import Any

from fastapi import status


class ActionError(Exception):
    """Base class for errors surfaced to the caller of the action pipeline."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "ActionExecuteError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ActionError):
    """Malformed input or a business rule violated at validation or execution time."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "InvalidRequest"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class UnauthorizedError(ActionError):
    """No valid identity on the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "Unauthorized"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ForbiddenError(ActionError):
    """Authenticated, but the target entity belongs to someone else."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "Forbidden"


class NotFoundError(ActionError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NotFound"


def status_for_error(exc: BaseException) -> int:
    """Map an exception to the HTTP status a hosting transport should return."""
    if isinstance(exc, ActionError):
        return exc.status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: BaseException) -> dict[str, Any]:
    """Build the JSON error envelope for an exception."""
    if isinstance(exc, ValidationError) and exc.errors:
        return {"error": exc.error_code, "details": {"message": exc.message, "errors": exc.errors}}
    if isinstance(exc, ActionError):
        return {"error": exc.error_code, "details": exc.message}
    return {"error": ActionError.error_code}
