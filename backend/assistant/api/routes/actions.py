"""Assistant action endpoints - preview and execute."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from backend.assistant.actions.service import ActionService
from backend.assistant.api.auth import get_current_user
from backend.assistant.api.deps import get_action_service, get_json_body

router = APIRouter(prefix="/assistant/actions")


@router.post("/execute")
async def execute_actions(
    user_id: Annotated[str, Depends(get_current_user)],
    payload: Annotated[Any, Depends(get_json_body)],
    service: Annotated[ActionService, Depends(get_action_service)],
) -> dict[str, Any]:
    """Apply one intent or a batch of up to six, in order.

    Returns:
        ``{"summaries": [...]}``, one past-tense summary per applied intent

    Raises:
        ValidationError (400), ForbiddenError (403), NotFoundError (404) from the first
        failing intent; earlier intents in the batch stay applied
    """
    result = await service.submit_batch(user_id, payload)
    return result.model_dump(by_alias=True)


@router.post("/preview")
async def preview_action(
    user_id: Annotated[str, Depends(get_current_user)],
    payload: Annotated[Any, Depends(get_json_body)],
    service: Annotated[ActionService, Depends(get_action_service)],
) -> dict[str, Any]:
    """Describe a suggested intent without applying it."""
    response = await service.preview(user_id, payload)
    return response.model_dump(mode="json", by_alias=True)
