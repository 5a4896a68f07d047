"""Preview and execution result models."""

from typing import Any

from pydantic import Field

from backend.assistant.models.actions import ActionIntent
from backend.assistant.models.common import WireModel


class PreviewContext(WireModel):
    """Human-readable labels resolved by the caller for preview phrasing."""

    day_label: str | None = None
    destination_name: str | None = None
    from_day_label: str | None = None
    to_day_label: str | None = None
    trip_name: str | None = None


class PreviewResult(WireModel):
    """Non-mutating summary of what an intent would do."""

    summary: str
    requires_confirmation: bool = True
    action: ActionIntent
    details: dict[str, Any] = Field(default_factory=dict)


class PreviewResponse(WireModel):
    """Preview plus the assistant's rationale, returned to the UI."""

    preview: PreviewResult
    rationale: str | None = None


class ExecutionResult(WireModel):
    """Confirmation of one applied intent."""

    summary: str


class BatchResult(WireModel):
    """Summaries of a fully applied batch, in submission order."""

    summaries: list[str]
