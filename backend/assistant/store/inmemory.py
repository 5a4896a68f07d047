"""In-memory implementation of the trip store."""

import asyncio
import copy
import uuid
from datetime import date
from typing import Any

from backend.assistant.errors import NotFoundError, ValidationError
from backend.assistant.models.common import DestinationChanges, DestinationInput
from backend.assistant.store.mapping import (
    change_values,
    day_date_for,
    destination_values,
    extended_end_date,
)
from backend.assistant.store.repositories import DayRecord, DestinationRecord, TripRecord


def _new_id() -> str:
    return str(uuid.uuid4())


class InMemoryTripStore:
    """In-memory implementation of TripStore.

    A single lock serialises all mutations, which is stricter than the per-trip
    serialisation the protocol asks for. Reads hand out copies so callers never alias
    stored state.
    """

    def __init__(self) -> None:
        self._trips: dict[str, TripRecord] = {}
        self._days: dict[str, DayRecord] = {}
        self._destinations: dict[str, DestinationRecord] = {}
        self._lock = asyncio.Lock()

    # Seeding

    async def create_trip(
        self,
        user_id: str,
        name: str,
        start_date: date | None = None,
        end_date: date | None = None,
        day_count: int = 1,
        trip_id: str | None = None,
        day_ids: list[str] | None = None,
    ) -> TripRecord:
        """Create a trip with ``day_count`` empty days (used by seeding and tests)."""
        async with self._lock:
            trip = TripRecord(
                id=trip_id or _new_id(),
                user_id=user_id,
                name=name,
                start_date=start_date,
                end_date=end_date,
            )
            self._trips[trip.id] = trip
            ids = day_ids or [_new_id() for _ in range(day_count)]
            for order, day_id in enumerate(ids, start=1):
                self._days[day_id] = DayRecord(id=day_id, trip_id=trip.id, day_order=order)
            self._renumber_days(trip, self._sorted_days(trip.id))
            return copy.deepcopy(trip)

    # Reads

    async def get_trip(self, trip_id: str) -> TripRecord | None:
        """Get trip by ID."""
        trip = self._trips.get(trip_id)
        return copy.deepcopy(trip) if trip else None

    async def get_day(self, day_id: str) -> DayRecord | None:
        """Get day by ID."""
        day = self._days.get(day_id)
        return copy.deepcopy(day) if day else None

    async def get_destination(self, destination_id: str) -> DestinationRecord | None:
        """Get destination by ID."""
        destination = self._destinations.get(destination_id)
        return copy.deepcopy(destination) if destination else None

    async def list_days(self, trip_id: str) -> list[DayRecord]:
        """List days of a trip ordered by day_order."""
        return copy.deepcopy(self._sorted_days(trip_id))

    async def list_destinations(self, day_id: str) -> list[DestinationRecord]:
        """List stops of a day ordered by order_index."""
        return copy.deepcopy(self._sorted_stops(day_id))

    # Destination mutations

    async def add_destination(
        self, day_id: str, destination: DestinationInput, insert_index: int
    ) -> DestinationRecord:
        """Insert a stop at insert_index."""
        async with self._lock:
            self._require_day(day_id)
            stops = self._sorted_stops(day_id)
            record = DestinationRecord(
                id=_new_id(), day_id=day_id, order_index=0, **destination_values(destination)
            )
            stops.insert(min(insert_index, len(stops)), record)
            self._destinations[record.id] = record
            self._renumber_stops(stops)
            return copy.deepcopy(record)

    async def update_destination(
        self, destination_id: str, changes: DestinationChanges
    ) -> DestinationRecord:
        """Apply the non-null fields of changes."""
        async with self._lock:
            record = self._require_destination(destination_id)
            for key, value in change_values(changes).items():
                setattr(record, key, value)
            return copy.deepcopy(record)

    async def remove_destination(self, destination_id: str) -> None:
        """Delete a stop and close the gap."""
        async with self._lock:
            record = self._require_destination(destination_id)
            del self._destinations[destination_id]
            self._renumber_stops(self._sorted_stops(record.day_id))

    async def move_destination(
        self, destination_id: str, to_day_id: str, insert_index: int
    ) -> None:
        """Move a stop to insert_index of to_day_id."""
        async with self._lock:
            record = self._require_destination(destination_id)
            self._require_day(to_day_id)
            from_day_id = record.day_id

            target = [s for s in self._sorted_stops(to_day_id) if s.id != destination_id]
            target.insert(min(insert_index, len(target)), record)
            record.day_id = to_day_id

            if from_day_id != to_day_id:
                self._renumber_stops(self._sorted_stops(from_day_id))
            self._renumber_stops(target)

    async def reorder_destinations(self, day_id: str, ordered_ids: list[str]) -> None:
        """Rewrite the ordering of a day's stops."""
        async with self._lock:
            self._require_day(day_id)
            stops = {s.id: s for s in self._sorted_stops(day_id)}
            if sorted(ordered_ids) != sorted(stops):
                raise ValidationError("Ordered ids do not match the day's destinations")
            self._renumber_stops([stops[i] for i in ordered_ids])

    # Day mutations

    async def set_day_locations(self, day_id: str, locations: list[dict[str, Any]]) -> None:
        """Replace the base location list of a day."""
        async with self._lock:
            day = self._require_day(day_id)
            day.base_locations = copy.deepcopy(locations)

    async def add_day(self, trip_id: str, position: int) -> DayRecord:
        """Insert an empty day at position."""
        async with self._lock:
            trip = self._require_trip(trip_id)
            days = self._sorted_days(trip_id)
            day = DayRecord(id=_new_id(), trip_id=trip_id, day_order=0)
            days.insert(min(position, len(days)), day)
            self._days[day.id] = day
            self._renumber_days(trip, days)
            return copy.deepcopy(day)

    async def remove_day(self, day_id: str) -> None:
        """Delete a day and its stops."""
        async with self._lock:
            day = self._require_day(day_id)
            trip = self._require_trip(day.trip_id)
            for stop in self._sorted_stops(day_id):
                del self._destinations[stop.id]
            del self._days[day_id]
            self._renumber_days(trip, self._sorted_days(trip.id))

    async def duplicate_day(self, day_id: str) -> DayRecord:
        """Copy a day and its stops right after the original."""
        async with self._lock:
            original = self._require_day(day_id)
            trip = self._require_trip(original.trip_id)
            days = self._sorted_days(trip.id)

            clone = DayRecord(
                id=_new_id(),
                trip_id=trip.id,
                day_order=0,
                base_locations=copy.deepcopy(original.base_locations),
            )
            for stop in self._sorted_stops(day_id):
                stop_copy = copy.deepcopy(stop)
                stop_copy.id = _new_id()
                stop_copy.day_id = clone.id
                self._destinations[stop_copy.id] = stop_copy

            days.insert(days.index(original) + 1, clone)
            self._days[clone.id] = clone
            self._renumber_days(trip, days)
            return copy.deepcopy(clone)

    async def update_trip_dates(self, trip_id: str, start_date: date, end_date: date) -> None:
        """Set the trip date range and re-date its days."""
        async with self._lock:
            trip = self._require_trip(trip_id)
            trip.start_date = start_date
            trip.end_date = end_date
            self._renumber_days(trip, self._sorted_days(trip_id))

    # Internals

    def _require_trip(self, trip_id: str) -> TripRecord:
        trip = self._trips.get(trip_id)
        if trip is None:
            raise NotFoundError("Trip not found")
        return trip

    def _require_day(self, day_id: str) -> DayRecord:
        day = self._days.get(day_id)
        if day is None:
            raise NotFoundError("Day not found")
        return day

    def _require_destination(self, destination_id: str) -> DestinationRecord:
        destination = self._destinations.get(destination_id)
        if destination is None:
            raise NotFoundError("Destination not found")
        return destination

    def _sorted_days(self, trip_id: str) -> list[DayRecord]:
        days = [d for d in self._days.values() if d.trip_id == trip_id]
        return sorted(days, key=lambda d: d.day_order)

    def _sorted_stops(self, day_id: str) -> list[DestinationRecord]:
        stops = [s for s in self._destinations.values() if s.day_id == day_id]
        return sorted(stops, key=lambda s: s.order_index)

    @staticmethod
    def _renumber_stops(stops: list[DestinationRecord]) -> None:
        for index, stop in enumerate(stops):
            stop.order_index = index

    @staticmethod
    def _renumber_days(trip: TripRecord, days: list[DayRecord]) -> None:
        for order, day in enumerate(days, start=1):
            day.day_order = order
            if trip.start_date is not None:
                day.day_date = day_date_for(trip.start_date, order)
        trip.end_date = extended_end_date(trip.start_date, trip.end_date, len(days))
