"""FastAPI dependencies resolving services built by ``create_app``."""

import json
from typing import Any

from fastapi import Request

from backend.assistant.actions.service import ActionService
from backend.assistant.errors import ValidationError
from backend.assistant.turns import AssistantTurnService


def get_action_service(request: Request) -> ActionService:
    return request.app.state.action_service


def get_turn_service(request: Request) -> AssistantTurnService:
    return request.app.state.turn_service


async def get_json_body(request: Request) -> Any:
    """Decoded request body, handed unvalidated to the action validators."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("request body must be valid JSON") from e
