"""Audit and telemetry records handed to the logging subsystem."""

from enum import Enum
from typing import Any

from pydantic import Field

from backend.assistant.models.common import WireModel


class AuditEvent(str, Enum):
    """Kind of action audit entry."""

    preview = "preview"
    execute = "execute"


class AuditRecord(WireModel):
    """One preview or execute attempt. Timestamp is assigned by the sink at write time."""

    event: AuditEvent
    user_id: str
    action_type: str
    summary: str
    payload: dict[str, Any] = Field(default_factory=dict)


class TelemetryRecord(WireModel):
    """One assistant turn, including turns blocked by the prompt guard."""

    user_id: str
    conversation_id: str | None = None
    message_id: str
    model: str
    prompt_tokens: int | None = Field(default=None, ge=0)
    completion_tokens: int | None = Field(default=None, ge=0)
    total_tokens: int | None = Field(default=None, ge=0)
    cost_usd: float | None = Field(default=None, ge=0)
    blocked: bool = False
    block_reason: str | None = None
