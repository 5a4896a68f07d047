"""Unit tests for error taxonomy and HTTP status mapping."""

import pytest

from backend.assistant.errors import (
    ActionError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    error_body,
    status_for_error,
)


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (ValidationError("bad"), 400, "InvalidRequest"),
        (UnauthorizedError(), 401, "Unauthorized"),
        (ForbiddenError("not yours"), 403, "Forbidden"),
        (NotFoundError("gone"), 404, "NotFound"),
    ],
)
def test_action_errors_map_to_status(exc: ActionError, status: int, code: str) -> None:
    assert status_for_error(exc) == status
    assert error_body(exc) == {"error": code, "details": exc.message}


def test_unknown_error_maps_to_500() -> None:
    exc = RuntimeError("connection reset")
    assert status_for_error(exc) == 500
    assert error_body(exc) == {"error": "ActionExecuteError"}


def test_validation_error_carries_field_errors() -> None:
    errors = [{"loc": ["dayId"], "msg": "Field required", "type": "missing"}]
    body = error_body(ValidationError("invalid action payload", errors=errors))
    assert body["error"] == "InvalidRequest"
    assert body["details"]["errors"] == errors


def test_errors_are_exceptions() -> None:
    with pytest.raises(ActionError, match="gone"):
        raise NotFoundError("gone")
