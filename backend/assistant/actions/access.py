"""Ownership checks and human-readable labels for trip entities.

Every lookup walks up to the owning trip: an id that does not resolve raises
``NotFoundError``, and a trip owned by another user raises ``ForbiddenError``.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from backend.assistant.errors import ForbiddenError, NotFoundError, ValidationError
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
from backend.assistant.models.preview import PreviewContext
from backend.assistant.store.repositories import (
    DayRecord,
    DestinationRecord,
    TripRecord,
    TripStore,
)


@dataclass
class DayAccess:
    """A day the user may modify, with its trip and display label."""

    trip: TripRecord
    day: DayRecord
    label: str


@dataclass
class DestinationAccess(DayAccess):
    """A destination the user may modify."""

    destination: DestinationRecord


def format_day_label(day: DayRecord) -> str:
    """Format ``Day 5 (Apr 18)``, or ``Day 5`` when the day has no date."""
    if day.day_date is None:
        return f"Day {day.day_order}"
    return f"Day {day.day_order} ({day.day_date:%b} {day.day_date.day})"


async def ensure_trip_access(store: TripStore, user_id: str, trip_id: str) -> TripRecord:
    """Resolve a trip owned by user_id."""
    trip = await store.get_trip(trip_id)
    if trip is None:
        raise NotFoundError("Trip not found")
    if trip.user_id != user_id:
        raise ForbiddenError("Trip does not belong to this user")
    return trip


async def ensure_day_access(store: TripStore, user_id: str, day_id: str) -> DayAccess:
    """Resolve a day whose trip is owned by user_id."""
    day = await store.get_day(day_id)
    if day is None:
        raise NotFoundError("Day not found")

    trip = await store.get_trip(day.trip_id)
    if trip is None:
        raise NotFoundError("Trip not found")
    if trip.user_id != user_id:
        raise ForbiddenError("Day does not belong to this user")

    return DayAccess(trip=trip, day=day, label=format_day_label(day))


async def ensure_destination_access(
    store: TripStore, user_id: str, destination_id: str
) -> DestinationAccess:
    """Resolve a destination whose trip is owned by user_id."""
    destination = await store.get_destination(destination_id)
    if destination is None:
        raise NotFoundError("Destination not found")

    access = await ensure_day_access(store, user_id, destination.day_id)
    return DestinationAccess(
        trip=access.trip, day=access.day, label=access.label, destination=destination
    )


async def ensure_destination_on_day(
    store: TripStore, user_id: str, destination_id: str, day_id: str
) -> DestinationAccess:
    """Resolve a destination and check that it sits on the given day."""
    access = await ensure_destination_access(store, user_id, destination_id)
    if access.day.id != day_id:
        raise ValidationError("Destination does not belong to the provided dayId")
    return access


async def ensure_move_target(
    store: TripStore, user_id: str, origin: DestinationAccess, to_day_id: str
) -> DayAccess:
    """Resolve the target day of a move; it must exist and share the origin's trip."""
    try:
        target = await ensure_day_access(store, user_id, to_day_id)
    except NotFoundError as e:
        raise ValidationError("Target day does not exist") from e
    if target.trip.id != origin.trip.id:
        raise ForbiddenError("Destination can only be moved within the same trip")
    return target


# Preview context resolution


async def _day_context(store: TripStore, user_id: str, action: Any) -> PreviewContext:
    access = await ensure_day_access(store, user_id, action.day_id)
    return PreviewContext(day_label=access.label, trip_name=access.trip.name)


async def _destination_context(store: TripStore, user_id: str, action: Any) -> PreviewContext:
    access = await ensure_destination_on_day(store, user_id, action.destination_id, action.day_id)
    return PreviewContext(
        day_label=access.label,
        destination_name=access.destination.name,
        trip_name=access.trip.name,
    )


async def _move_context(
    store: TripStore, user_id: str, action: MoveDestinationAction
) -> PreviewContext:
    origin = await ensure_destination_on_day(
        store, user_id, action.destination_id, action.from_day_id
    )
    target = await ensure_move_target(store, user_id, origin, action.to_day_id)
    return PreviewContext(
        destination_name=origin.destination.name,
        from_day_label=origin.label,
        to_day_label=target.label,
        trip_name=origin.trip.name,
    )


async def _add_day_context(store: TripStore, user_id: str, action: AddDayAction) -> PreviewContext:
    trip = await ensure_trip_access(store, user_id, action.trip_id)
    day_label = None
    if action.after_day_id:
        after = await ensure_day_access(store, user_id, action.after_day_id)
        if after.trip.id != trip.id:
            raise ValidationError("afterDayId is not part of this trip")
        day_label = after.label
    return PreviewContext(trip_name=trip.name, day_label=day_label)


async def _trip_context(store: TripStore, user_id: str, action: Any) -> PreviewContext:
    trip = await ensure_trip_access(store, user_id, action.trip_id)
    return PreviewContext(trip_name=trip.name)


CONTEXT_RESOLVERS: dict[
    type[BaseIntent], Callable[[TripStore, str, Any], Awaitable[PreviewContext]]
] = {
    AddDestinationAction: _day_context,
    UpdateDestinationAction: _destination_context,
    RemoveDestinationAction: _destination_context,
    MoveDestinationAction: _move_context,
    ReorderDestinationsAction: _day_context,
    SetDayLocationAction: _day_context,
    DuplicateDayAction: _day_context,
    RemoveDayAction: _day_context,
    AddDayAction: _add_day_context,
    UpdateTripDatesAction: _trip_context,
}


async def resolve_preview_context(
    store: TripStore, user_id: str, intent: ActionIntent
) -> PreviewContext:
    """Check ownership of everything the intent touches and collect preview labels."""
    resolver = CONTEXT_RESOLVERS.get(type(intent))
    if resolver is None:
        raise TypeError(f"No context resolver for {type(intent).__name__}")
    return await resolver(store, user_id, intent)
