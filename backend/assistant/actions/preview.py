"""Preview builder - deterministic, non-mutating summaries of action intents.

Labels (``day_label``, ``destination_name``, ...) are resolved by the caller. When a
label is missing the builder falls back to the raw identifier, so a summary is always
produced. Every intent currently requires confirmation.
"""

from collections.abc import Callable
from datetime import date
from typing import Any

from backend.assistant.models.actions import (
    ActionIntent,
    AddDayAction,
    AddDestinationAction,
    BaseIntent,
    DuplicateDayAction,
    MoveDestinationAction,
    RemoveDayAction,
    RemoveDestinationAction,
    ReorderDestinationsAction,
    SetDayLocationAction,
    UpdateDestinationAction,
    UpdateTripDatesAction,
)
from backend.assistant.models.preview import PreviewContext, PreviewResult

FIELD_LABELS: dict[str, str] = {
    "name": "name",
    "category": "category",
    "city": "city",
    "notes": "notes",
    "coordinates": "location",
    "estimated_duration_minutes": "duration",
    "start_time_iso": "start time",
    "end_time_iso": "end time",
    "links": "links",
}


def format_date(value: date) -> str:
    """Format a date as ``Apr 18, 2025``."""
    return f"{value:%b} {value.day}, {value.year}"


def format_field_list(fields: list[str]) -> str:
    """Join changed field names as ``name, city and notes``."""
    if not fields:
        return "details"
    mapped = [FIELD_LABELS.get(field, field) for field in fields]
    if len(mapped) == 1:
        return mapped[0]
    return f"{', '.join(mapped[:-1])} and {mapped[-1]}"


def _day(label: str | None, day_id: str) -> str:
    return label or f"day {day_id}"


def _preview(summary: str, action: BaseIntent, details: dict[str, Any]) -> PreviewResult:
    return PreviewResult(
        summary=summary,
        requires_confirmation=True,
        action=action,  # type: ignore[arg-type]
        details=details,
    )


def _add_destination(action: AddDestinationAction, ctx: PreviewContext) -> PreviewResult:
    return _preview(
        f"Add {action.destination.name} to {_day(ctx.day_label, action.day_id)}",
        action,
        {"dayId": action.day_id, "insertIndex": action.insert_index},
    )


def _update_destination(action: UpdateDestinationAction, ctx: PreviewContext) -> PreviewResult:
    fields = action.changes.changed_fields()
    name = ctx.destination_name or action.destination_id
    day_suffix = f" ({ctx.day_label})" if ctx.day_label else ""
    return _preview(
        f"Update {format_field_list(fields)} for {name}{day_suffix}",
        action,
        {"dayId": action.day_id, "destinationId": action.destination_id, "fields": fields},
    )


def _remove_destination(action: RemoveDestinationAction, ctx: PreviewContext) -> PreviewResult:
    name = ctx.destination_name or action.destination_id
    return _preview(
        f"Remove {name} from {_day(ctx.day_label, action.day_id)}",
        action,
        {"dayId": action.day_id, "destinationId": action.destination_id},
    )


def _move_destination(action: MoveDestinationAction, ctx: PreviewContext) -> PreviewResult:
    name = ctx.destination_name or action.destination_id
    from_label = _day(ctx.from_day_label, action.from_day_id)
    if action.is_same_day:
        return _preview(
            f"Reorder {name} within {from_label}",
            action,
            {
                "destinationId": action.destination_id,
                "dayId": action.from_day_id,
                "insertIndex": action.insert_index,
            },
        )
    to_label = _day(ctx.to_day_label, action.to_day_id)
    return _preview(
        f"Move {name} from {from_label} to {to_label}",
        action,
        {
            "destinationId": action.destination_id,
            "fromDayId": action.from_day_id,
            "toDayId": action.to_day_id,
            "insertIndex": action.insert_index,
        },
    )


def _reorder_destinations(
    action: ReorderDestinationsAction, ctx: PreviewContext
) -> PreviewResult:
    return _preview(
        f"Reorder stops on {_day(ctx.day_label, action.day_id)}: "
        f"move stop {action.from_index + 1} to position {action.to_index + 1}",
        action,
        {"dayId": action.day_id, "fromIndex": action.from_index, "toIndex": action.to_index},
    )


def _set_day_location(action: SetDayLocationAction, ctx: PreviewContext) -> PreviewResult:
    day_label = _day(ctx.day_label, action.day_id)
    name = action.location.name
    if action.replace_existing:
        summary = f"Set base location for {day_label} to {name}"
    else:
        summary = f"Add base location {name} to {day_label}"
    return _preview(
        summary,
        action,
        {
            "dayId": action.day_id,
            "replaceExisting": action.replace_existing,
            "locationIndex": action.location_index,
        },
    )


def _duplicate_day(action: DuplicateDayAction, ctx: PreviewContext) -> PreviewResult:
    return _preview(
        f"Duplicate {_day(ctx.day_label, action.day_id)}", action, {"dayId": action.day_id}
    )


def _remove_day(action: RemoveDayAction, ctx: PreviewContext) -> PreviewResult:
    return _preview(
        f"Remove {_day(ctx.day_label, action.day_id)} and its stops",
        action,
        {"dayId": action.day_id},
    )


def _add_day(action: AddDayAction, ctx: PreviewContext) -> PreviewResult:
    summary = f"Add a day to {ctx.trip_name or f'trip {action.trip_id}'}"
    if action.after_day_id:
        summary += f" after {_day(ctx.day_label, action.after_day_id)}"
    if action.on_date:
        summary += f" on {format_date(action.on_date)}"
    return _preview(
        summary,
        action,
        {
            "tripId": action.trip_id,
            "afterDayId": action.after_day_id,
            "date": action.on_date.isoformat() if action.on_date else None,
        },
    )


def _update_trip_dates(action: UpdateTripDatesAction, ctx: PreviewContext) -> PreviewResult:
    trip_label = ctx.trip_name or f"trip {action.trip_id}"
    return _preview(
        f"Change dates of {trip_label} to "
        f"{format_date(action.start_date)} – {format_date(action.end_date)}",
        action,
        {
            "tripId": action.trip_id,
            "startDate": action.start_date.isoformat(),
            "endDate": action.end_date.isoformat(),
        },
    )


PREVIEW_BUILDERS: dict[type[BaseIntent], Callable[[Any, PreviewContext], PreviewResult]] = {
    AddDestinationAction: _add_destination,
    UpdateDestinationAction: _update_destination,
    RemoveDestinationAction: _remove_destination,
    MoveDestinationAction: _move_destination,
    ReorderDestinationsAction: _reorder_destinations,
    SetDayLocationAction: _set_day_location,
    DuplicateDayAction: _duplicate_day,
    RemoveDayAction: _remove_day,
    AddDayAction: _add_day,
    UpdateTripDatesAction: _update_trip_dates,
}


def build_preview(
    intent: ActionIntent, context: PreviewContext | dict[str, Any] | None = None
) -> PreviewResult:
    """Build the confirmation preview for an intent.

    Args:
        intent: Validated intent
        context: Labels resolved by the caller (model or camelCase/snake_case dict)

    Returns:
        PreviewResult with ``requires_confirmation`` set
    """
    if context is None:
        ctx = PreviewContext()
    elif isinstance(context, PreviewContext):
        ctx = context
    else:
        ctx = PreviewContext.model_validate(context)

    builder = PREVIEW_BUILDERS.get(type(intent))
    if builder is None:
        raise TypeError(f"No preview builder for {type(intent).__name__}")
    return builder(intent, ctx)
