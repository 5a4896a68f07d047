"""Assistant turn screening and telemetry."""

import logging

from backend.assistant import guard
from backend.assistant.audit.recorder import TelemetryRecorder
from backend.assistant.config import Settings
from backend.assistant.guard import GuardBlocked, GuardResult
from backend.assistant.models.records import TelemetryRecord

logger = logging.getLogger(__name__)

GUARD_MODEL = "prompt_guard"

# USD per token: (prompt, completion)
MODEL_RATES: dict[str, tuple[float, float]] = {
    "gpt-4o-mini": (0.0000006, 0.0000024),
    "gpt-4o": (0.000005, 0.000015),
}


def estimate_cost_usd(
    model: str, prompt_tokens: int | None, completion_tokens: int | None
) -> float | None:
    """Estimate the USD cost of one model call.

    Returns:
        Cost rounded to 6 decimals, or None for an unknown model or when no tokens
        were reported
    """
    rates = MODEL_RATES.get(model)
    if rates is None:
        return None
    if prompt_tokens is None and completion_tokens is None:
        return None

    prompt_rate, completion_rate = rates
    cost = (prompt_tokens or 0) * prompt_rate + (completion_tokens or 0) * completion_rate
    return round(cost, 6)


class AssistantTurnService:
    """Screens raw user input and records per-turn telemetry."""

    def __init__(self, telemetry: TelemetryRecorder, settings: Settings) -> None:
        self._telemetry = telemetry
        self._settings = settings

    def screen(
        self,
        user_id: str,
        message_id: str,
        text: str,
        conversation_id: str | None = None,
    ) -> GuardResult:
        """Run the prompt guard; a blocked input is recorded as a blocked turn."""
        result = guard.check(text)
        if isinstance(result, GuardBlocked):
            self._telemetry.record(
                TelemetryRecord(
                    user_id=user_id,
                    conversation_id=conversation_id,
                    message_id=message_id,
                    model=GUARD_MODEL,
                    blocked=True,
                    block_reason=result.reason,
                )
            )
        return result

    def record_turn(
        self,
        user_id: str,
        message_id: str,
        model: str,
        prompt_tokens: int | None,
        completion_tokens: int | None,
        conversation_id: str | None = None,
    ) -> TelemetryRecord:
        """Record token usage and estimated cost of a completed turn."""
        total_tokens = None
        if prompt_tokens is not None or completion_tokens is not None:
            total_tokens = (prompt_tokens or 0) + (completion_tokens or 0)

        record = TelemetryRecord(
            user_id=user_id,
            conversation_id=conversation_id,
            message_id=message_id,
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
            cost_usd=estimate_cost_usd(model, prompt_tokens, completion_tokens),
        )
        if model not in (self._settings.model_primary, self._settings.model_fallback):
            logger.info(
                f"Turn recorded for unconfigured model {model}",
                extra={"structured": {"user_id": user_id, "model": model}},
            )
        self._telemetry.record(record)
        return record
