"""Models package - re-exports for convenience."""

from backend.assistant.models.actions import (
    ACTION_TYPES,
    ActionIntent,
    AddDayAction,
    AddDestinationAction,
    BaseIntent,
    DuplicateDayAction,
    MoveDestinationAction,
    PreviewEnvelope,
    RemoveDayAction,
    RemoveDestinationAction,
    ReorderDestinationsAction,
    SetDayLocationAction,
    UpdateDestinationAction,
    UpdateTripDatesAction,
)
from backend.assistant.models.common import (
    ActionMetadata,
    ActionSource,
    BaseLocationInput,
    DestinationChanges,
    DestinationInput,
    DestinationLink,
)
from backend.assistant.models.preview import (
    BatchResult,
    ExecutionResult,
    PreviewContext,
    PreviewResponse,
    PreviewResult,
)
from backend.assistant.models.records import AuditEvent, AuditRecord, TelemetryRecord

__all__ = [
    # Common
    "ActionMetadata",
    "ActionSource",
    "BaseLocationInput",
    "DestinationChanges",
    "DestinationInput",
    "DestinationLink",
    # Intents
    "ACTION_TYPES",
    "ActionIntent",
    "BaseIntent",
    "AddDestinationAction",
    "UpdateDestinationAction",
    "RemoveDestinationAction",
    "MoveDestinationAction",
    "ReorderDestinationsAction",
    "SetDayLocationAction",
    "DuplicateDayAction",
    "RemoveDayAction",
    "AddDayAction",
    "UpdateTripDatesAction",
    "PreviewEnvelope",
    # Preview / results
    "PreviewContext",
    "PreviewResult",
    "PreviewResponse",
    "ExecutionResult",
    "BatchResult",
    # Records
    "AuditEvent",
    "AuditRecord",
    "TelemetryRecord",
]
