"""Prompt guard endpoint."""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import Field

from backend.assistant.api.auth import get_current_user
from backend.assistant.api.deps import get_turn_service
from backend.assistant.guard import GuardBlocked
from backend.assistant.models.common import WireModel
from backend.assistant.turns import AssistantTurnService

router = APIRouter(prefix="/assistant")


class ScreenRequest(WireModel):
    """Raw user text to screen before it reaches the model."""

    text: str = Field(..., max_length=8000)
    message_id: str | None = None
    conversation_id: str | None = None


@router.post("/screen")
async def screen_message(
    body: ScreenRequest,
    user_id: Annotated[str, Depends(get_current_user)],
    service: Annotated[AssistantTurnService, Depends(get_turn_service)],
) -> dict[str, Any]:
    """Return ``{"allow": true}`` or ``{"allow": false, "reason", "message"}``."""
    result = service.screen(
        user_id,
        body.message_id or str(uuid.uuid4()),
        body.text,
        conversation_id=body.conversation_id,
    )
    if isinstance(result, GuardBlocked):
        return {"allow": False, "reason": result.reason, "message": result.message}
    return {"allow": True}
