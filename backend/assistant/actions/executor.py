"""Action executor - applies one validated intent against the trip store.

Per intent: received -> validated -> authorized -> applied -> summarized, or rejected
with ValidationError / NotFoundError / ForbiddenError. Each intent maps to exactly one
store mutation call. All checks run before that call, so a rejected intent leaves the
store untouched. There are no retries at this layer.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any

from backend.assistant.actions.access import (
    ensure_day_access,
    ensure_destination_on_day,
    ensure_move_target,
    ensure_trip_access,
    format_day_label,
)
from backend.assistant.actions.preview import format_date
from backend.assistant.errors import ActionError, ValidationError
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
from backend.assistant.models.preview import ExecutionResult
from backend.assistant.store.mapping import location_value
from backend.assistant.store.repositories import TripStore


# Metrics interface (implemented by PrometheusActionMetrics)
class ActionMetrics:
    """Interface for action execution metrics."""

    def record_attempt(self, action_type: str, outcome: str, latency_ms: float) -> None:
        """Record one action attempt."""
        pass


# Logging interface (implemented by StructuredActionLogger)
class ActionLogger:
    """Interface for structured logging."""

    def log_attempt(
        self,
        user_id: str,
        action_type: str,
        outcome: str,
        latency_ms: float,
        summary: str | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log one action attempt."""
        pass


class ActionExecutor:
    """Executes intents one at a time against a TripStore."""

    def __init__(
        self,
        store: TripStore,
        metrics: ActionMetrics | None = None,
        logger: ActionLogger | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            store: Trip store collaborator
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
        """
        self._store = store
        self._metrics = metrics or ActionMetrics()
        self._logger = logger or ActionLogger()
        self._handlers: dict[type[BaseIntent], Callable[[str, Any], Awaitable[str]]] = {
            AddDestinationAction: self._add_destination,
            UpdateDestinationAction: self._update_destination,
            RemoveDestinationAction: self._remove_destination,
            MoveDestinationAction: self._move_destination,
            ReorderDestinationsAction: self._reorder_destinations,
            SetDayLocationAction: self._set_day_location,
            DuplicateDayAction: self._duplicate_day,
            RemoveDayAction: self._remove_day,
            AddDayAction: self._add_day,
            UpdateTripDatesAction: self._update_trip_dates,
        }

    @property
    def handled_types(self) -> frozenset[type[BaseIntent]]:
        return frozenset(self._handlers)

    async def execute(self, user_id: str, intent: ActionIntent) -> ExecutionResult:
        """Apply one intent on behalf of user_id.

        Returns:
            ExecutionResult with a past-tense confirmation summary

        Raises:
            ValidationError: Business rule violated (nothing applied)
            NotFoundError: Referenced trip/day/destination does not exist
            ForbiddenError: Target belongs to another user
        """
        start_time = time.monotonic()
        handler = self._handlers.get(type(intent))
        if handler is None:
            raise ValidationError(f"Unsupported action type: {intent.type}")

        try:
            summary = await handler(user_id, intent)
        except ActionError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_attempt(intent.type, "rejected", elapsed_ms)
            self._logger.log_attempt(
                user_id, intent.type, "rejected", elapsed_ms, error_reason=f"{e.error_code}: {e}"
            )
            raise
        except Exception as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_attempt(intent.type, "error", elapsed_ms)
            self._logger.log_attempt(
                user_id, intent.type, "error", elapsed_ms, error_reason=type(e).__name__
            )
            raise

        elapsed_ms = (time.monotonic() - start_time) * 1000
        self._metrics.record_attempt(intent.type, "applied", elapsed_ms)
        self._logger.log_attempt(user_id, intent.type, "applied", elapsed_ms, summary=summary)
        return ExecutionResult(summary=summary)

    # Destination handlers

    async def _add_destination(self, user_id: str, action: AddDestinationAction) -> str:
        access = await ensure_day_access(self._store, user_id, action.day_id)
        stops = await self._store.list_destinations(action.day_id)

        index = len(stops) if action.insert_index is None else action.insert_index
        if index > len(stops):
            raise ValidationError(
                f"insertIndex {index} is beyond the {len(stops)} destinations on {access.label}"
            )

        await self._store.add_destination(action.day_id, action.destination, index)
        return f"Added {action.destination.name} to {access.label}"

    async def _update_destination(self, user_id: str, action: UpdateDestinationAction) -> str:
        access = await ensure_destination_on_day(
            self._store, user_id, action.destination_id, action.day_id
        )
        await self._store.update_destination(action.destination_id, action.changes)
        name = action.changes.name or access.destination.name
        return f"Updated {name} on {access.label}"

    async def _remove_destination(self, user_id: str, action: RemoveDestinationAction) -> str:
        access = await ensure_destination_on_day(
            self._store, user_id, action.destination_id, action.day_id
        )
        await self._store.remove_destination(action.destination_id)
        return f"Removed {access.destination.name} from {access.label}"

    async def _move_destination(self, user_id: str, action: MoveDestinationAction) -> str:
        origin = await ensure_destination_on_day(
            self._store, user_id, action.destination_id, action.from_day_id
        )
        target = await ensure_move_target(self._store, user_id, origin, action.to_day_id)

        remaining = [
            s
            for s in await self._store.list_destinations(action.to_day_id)
            if s.id != action.destination_id
        ]
        index = len(remaining) if action.insert_index is None else action.insert_index
        if index > len(remaining):
            raise ValidationError(
                f"insertIndex {index} is beyond the {len(remaining)} destinations on {target.label}"
            )

        await self._store.move_destination(action.destination_id, action.to_day_id, index)

        name = origin.destination.name
        if action.is_same_day:
            return f"Reordered {name} within {origin.label}"
        return f"Moved {name} from {origin.label} to {target.label}"

    async def _reorder_destinations(self, user_id: str, action: ReorderDestinationsAction) -> str:
        access = await ensure_day_access(self._store, user_id, action.day_id)
        ids = [s.id for s in await self._store.list_destinations(action.day_id)]

        for field_name, index in (("fromIndex", action.from_index), ("toIndex", action.to_index)):
            if index >= len(ids):
                raise ValidationError(
                    f"{field_name} {index} is outside the {len(ids)} destinations on {access.label}"
                )

        ids.insert(action.to_index, ids.pop(action.from_index))
        await self._store.reorder_destinations(action.day_id, ids)
        return (
            f"Reordered stops on {access.label}: "
            f"moved stop {action.from_index + 1} to position {action.to_index + 1}"
        )

    # Day handlers

    async def _set_day_location(self, user_id: str, action: SetDayLocationAction) -> str:
        access = await ensure_day_access(self._store, user_id, action.day_id)
        entry = location_value(action.location)
        name = action.location.name

        if action.replace_existing:
            await self._store.set_day_locations(action.day_id, [entry])
            return f"Set base location for {access.label} to {name}"

        locations = list(access.day.base_locations)
        index = len(locations) if action.location_index is None else action.location_index
        if index > len(locations):
            raise ValidationError(
                f"locationIndex {index} is beyond the {len(locations)} base locations "
                f"on {access.label}"
            )
        locations.insert(index, entry)
        await self._store.set_day_locations(action.day_id, locations)
        return f"Added base location {name} to {access.label}"

    async def _duplicate_day(self, user_id: str, action: DuplicateDayAction) -> str:
        access = await ensure_day_access(self._store, user_id, action.day_id)
        clone = await self._store.duplicate_day(action.day_id)
        return f"Duplicated {access.label} as {format_day_label(clone)}"

    async def _remove_day(self, user_id: str, action: RemoveDayAction) -> str:
        access = await ensure_day_access(self._store, user_id, action.day_id)
        days = await self._store.list_days(access.trip.id)
        if len(days) <= 1:
            raise ValidationError("Cannot remove the only day of a trip")

        await self._store.remove_day(action.day_id)
        return f"Removed {access.label} from {access.trip.name}"

    async def _add_day(self, user_id: str, action: AddDayAction) -> str:
        trip = await ensure_trip_access(self._store, user_id, action.trip_id)
        days = await self._store.list_days(trip.id)
        position = len(days)

        if action.after_day_id is not None:
            after = await ensure_day_access(self._store, user_id, action.after_day_id)
            if after.trip.id != trip.id:
                raise ValidationError("afterDayId is not part of this trip")
            position = after.day.day_order

        if action.on_date is not None:
            if trip.start_date is None:
                raise ValidationError("Trip has no start date; a day cannot be placed by date")
            offset = (action.on_date - trip.start_date).days
            if not 0 <= offset <= len(days):
                raise ValidationError(
                    f"date {action.on_date.isoformat()} does not fall within or right after "
                    f"the {len(days)} planned days"
                )
            if action.after_day_id is not None and offset != position:
                raise ValidationError("date and afterDayId point at different positions")
            position = offset

        day = await self._store.add_day(trip.id, position)
        return f"Added {format_day_label(day)} to {trip.name}"

    async def _update_trip_dates(self, user_id: str, action: UpdateTripDatesAction) -> str:
        trip = await ensure_trip_access(self._store, user_id, action.trip_id)
        days = await self._store.list_days(trip.id)

        span = (action.end_date - action.start_date).days + 1
        if span < len(days):
            raise ValidationError(
                f"Date range covers {span} days but {trip.name} has {len(days)} planned days"
            )

        await self._store.update_trip_dates(trip.id, action.start_date, action.end_date)
        return (
            f"Updated dates of {trip.name} to "
            f"{format_date(action.start_date)} – {format_date(action.end_date)}"
        )
