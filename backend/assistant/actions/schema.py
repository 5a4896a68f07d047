"""Structural validation of assistant action payloads.

Accepted request shapes:
- ``{"action": {...}}``: a single intent
- ``{"actions": [...]}``: a batch of 1..6 intents
- ``{"type": ...}``: a bare intent

Validation is pure and synchronous. Failures raise ``ValidationError`` before any store
call is made.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from backend.assistant.config import MAX_BATCH_SIZE
from backend.assistant.errors import ValidationError
from backend.assistant.models.actions import ACTION_TYPES, ActionIntent, PreviewEnvelope

_intent_adapter: TypeAdapter[ActionIntent] = TypeAdapter(ActionIntent)


def _format_loc(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def _from_pydantic(exc: PydanticValidationError, prefix: str = "") -> ValidationError:
    """Translate a pydantic error into a ValidationError with a readable message."""
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    parts = []
    for err in errors:
        loc = _format_loc(tuple(err["loc"]))
        parts.append(f"{prefix}{loc}: {err['msg']}")
    return ValidationError("invalid action payload: " + "; ".join(parts), errors=list(errors))


def validate_intent(raw: Any, *, prefix: str = "") -> ActionIntent:
    """Validate one bare intent mapping into its typed variant.

    Raises:
        ValidationError: If the payload is not an object, has an unknown ``type``, or
            fails field validation.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{prefix}action must be an object")

    action_type = raw.get("type")
    if not isinstance(action_type, str) or action_type not in ACTION_TYPES:
        raise ValidationError("unknown action type")

    try:
        return _intent_adapter.validate_python(dict(raw))
    except PydanticValidationError as e:
        raise _from_pydantic(e, prefix) from e


def validate_request(raw: Any, max_batch_size: int = MAX_BATCH_SIZE) -> list[ActionIntent]:
    """Validate an execute request into an ordered list of intents.

    Args:
        raw: Decoded request body
        max_batch_size: Upper bound for ``actions`` (never above 6)

    Returns:
        Intents in submission order (a single intent becomes a one-item list)

    Raises:
        ValidationError: On an unrecognized shape, batch size out of bounds, or any
            invalid intent
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("request body must be an object")

    if "actions" in raw:
        actions = raw["actions"]
        if not isinstance(actions, list):
            raise ValidationError("actions must be a list")
        if not 1 <= len(actions) <= min(max_batch_size, MAX_BATCH_SIZE):
            raise ValidationError("batch size out of bounds")
        return [
            validate_intent(item, prefix=f"actions[{index}].")
            for index, item in enumerate(actions)
        ]

    if "action" in raw:
        return [validate_intent(raw["action"])]

    if "type" in raw:
        return [validate_intent(raw)]

    raise ValidationError("request must contain 'action' or 'actions'")


def validate_preview_envelope(raw: Any) -> PreviewEnvelope:
    """Validate a preview request (``suggestedAction`` plus optional ``rationale``)."""
    if not isinstance(raw, Mapping):
        raise ValidationError("request body must be an object")

    if "suggestedAction" in raw or "suggested_action" in raw:
        action_raw = raw.get("suggestedAction", raw.get("suggested_action"))
    elif "action" in raw:
        action_raw = raw["action"]
    else:
        action_raw = raw

    intent = validate_intent(action_raw)

    try:
        return PreviewEnvelope(suggested_action=intent, rationale=raw.get("rationale"))
    except PydanticValidationError as e:
        raise _from_pydantic(e) from e
