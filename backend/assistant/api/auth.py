"""Minimal auth dependency.

Stub identity provider: the bearer token is taken verbatim as the user id. Real token
validation belongs to the hosting product.
"""

from typing import Annotated

from fastapi import Header

from backend.assistant.errors import UnauthorizedError


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the user id from ``Authorization: Bearer <user_id>``.

    Raises:
        UnauthorizedError: If the header is missing or malformed
    """
    if not authorization:
        raise UnauthorizedError("Missing authorization header")

    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer":
        raise UnauthorizedError("Invalid authorization header format")

    user_id = token.strip()
    if not user_id or " " in user_id:
        raise UnauthorizedError("Invalid bearer token")
    return user_id
