"""SQL implementation of the trip store.

Every mutation runs in its own transaction, so a failure part-way leaves the trip
untouched. Day rows are selected ``FOR UPDATE`` (where the dialect supports it) to
serialise concurrent writers on the same trip.
"""

import uuid
from datetime import date
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.assistant.db.models import Trip, TripDay, TripDestination
from backend.assistant.errors import NotFoundError, ValidationError
from backend.assistant.models.common import DestinationChanges, DestinationInput
from backend.assistant.store.mapping import (
    change_values,
    day_date_for,
    destination_values,
    extended_end_date,
)
from backend.assistant.store.repositories import DayRecord, DestinationRecord, TripRecord


def _trip_record(row: Trip) -> TripRecord:
    return TripRecord(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        start_date=row.start_date,
        end_date=row.end_date,
    )


def _day_record(row: TripDay) -> DayRecord:
    return DayRecord(
        id=row.id,
        trip_id=row.trip_id,
        day_order=row.day_order,
        day_date=row.day_date,
        base_locations=list(row.base_locations or []),
    )


def _destination_record(row: TripDestination) -> DestinationRecord:
    return DestinationRecord(
        id=row.id,
        day_id=row.day_id,
        name=row.name,
        order_index=row.order_index,
        category=row.category,
        city=row.city,
        notes=row.notes,
        coordinates=row.coordinates,
        estimated_duration_minutes=row.estimated_duration_minutes,
        start_time_iso=row.start_time_iso,
        end_time_iso=row.end_time_iso,
        links=row.links,
    )


class SqlTripStore:
    """SQL implementation of TripStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

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
        """Create a trip with day_count empty days (used by seeding and tests)."""
        async with self._session_factory() as session, session.begin():
            trip = Trip(
                id=trip_id or str(uuid.uuid4()),
                user_id=user_id,
                name=name,
                start_date=start_date,
                end_date=end_date,
            )
            session.add(trip)
            ids = day_ids or [str(uuid.uuid4()) for _ in range(day_count)]
            days = [
                TripDay(id=day_id, trip_id=trip.id, day_order=order, base_locations=[])
                for order, day_id in enumerate(ids, start=1)
            ]
            session.add_all(days)
            self._renumber_days(trip, days)
            await session.flush()
            return _trip_record(trip)

    # Reads

    async def get_trip(self, trip_id: str) -> TripRecord | None:
        """Get trip by ID."""
        async with self._session_factory() as session:
            row = await session.get(Trip, trip_id)
            return _trip_record(row) if row else None

    async def get_day(self, day_id: str) -> DayRecord | None:
        """Get day by ID."""
        async with self._session_factory() as session:
            row = await session.get(TripDay, day_id)
            return _day_record(row) if row else None

    async def get_destination(self, destination_id: str) -> DestinationRecord | None:
        """Get destination by ID."""
        async with self._session_factory() as session:
            row = await session.get(TripDestination, destination_id)
            return _destination_record(row) if row else None

    async def list_days(self, trip_id: str) -> list[DayRecord]:
        """List days of a trip ordered by day_order."""
        async with self._session_factory() as session:
            return [_day_record(row) for row in await self._days(session, trip_id)]

    async def list_destinations(self, day_id: str) -> list[DestinationRecord]:
        """List stops of a day ordered by order_index."""
        async with self._session_factory() as session:
            return [_destination_record(row) for row in await self._stops(session, day_id)]

    # Destination mutations

    async def add_destination(
        self, day_id: str, destination: DestinationInput, insert_index: int
    ) -> DestinationRecord:
        """Insert a stop at insert_index."""
        async with self._session_factory() as session, session.begin():
            await self._require(session, TripDay, day_id, "Day not found")
            stops = await self._stops(session, day_id)
            row = TripDestination(
                id=str(uuid.uuid4()),
                day_id=day_id,
                order_index=0,
                **destination_values(destination),
            )
            stops.insert(min(insert_index, len(stops)), row)
            session.add(row)
            self._renumber_stops(stops)
            await session.flush()
            return _destination_record(row)

    async def update_destination(
        self, destination_id: str, changes: DestinationChanges
    ) -> DestinationRecord:
        """Apply the non-null fields of changes."""
        async with self._session_factory() as session, session.begin():
            row = await self._require(
                session, TripDestination, destination_id, "Destination not found"
            )
            for key, value in change_values(changes).items():
                setattr(row, key, value)
            await session.flush()
            return _destination_record(row)

    async def remove_destination(self, destination_id: str) -> None:
        """Delete a stop and close the gap."""
        async with self._session_factory() as session, session.begin():
            row = await self._require(
                session, TripDestination, destination_id, "Destination not found"
            )
            day_id = row.day_id
            await session.delete(row)
            await session.flush()
            self._renumber_stops(await self._stops(session, day_id))

    async def move_destination(
        self, destination_id: str, to_day_id: str, insert_index: int
    ) -> None:
        """Move a stop to insert_index of to_day_id."""
        async with self._session_factory() as session, session.begin():
            row = await self._require(
                session, TripDestination, destination_id, "Destination not found"
            )
            await self._require(session, TripDay, to_day_id, "Day not found")
            from_day_id = row.day_id

            target = [s for s in await self._stops(session, to_day_id) if s.id != destination_id]
            target.insert(min(insert_index, len(target)), row)
            row.day_id = to_day_id
            await session.flush()

            if from_day_id != to_day_id:
                self._renumber_stops(await self._stops(session, from_day_id))
            self._renumber_stops(target)

    async def reorder_destinations(self, day_id: str, ordered_ids: list[str]) -> None:
        """Rewrite the ordering of a day's stops."""
        async with self._session_factory() as session, session.begin():
            await self._require(session, TripDay, day_id, "Day not found")
            stops = {s.id: s for s in await self._stops(session, day_id)}
            if sorted(ordered_ids) != sorted(stops):
                raise ValidationError("Ordered ids do not match the day's destinations")
            self._renumber_stops([stops[i] for i in ordered_ids])

    # Day mutations

    async def set_day_locations(self, day_id: str, locations: list[dict[str, Any]]) -> None:
        """Replace the base location list of a day."""
        async with self._session_factory() as session, session.begin():
            day = await self._require(session, TripDay, day_id, "Day not found")
            day.base_locations = list(locations)

    async def add_day(self, trip_id: str, position: int) -> DayRecord:
        """Insert an empty day at position."""
        async with self._session_factory() as session, session.begin():
            trip = await self._require(session, Trip, trip_id, "Trip not found")
            days = await self._days(session, trip_id, for_update=True)
            day = TripDay(id=str(uuid.uuid4()), trip_id=trip_id, day_order=0, base_locations=[])
            days.insert(min(position, len(days)), day)
            session.add(day)
            self._renumber_days(trip, days)
            await session.flush()
            return _day_record(day)

    async def remove_day(self, day_id: str) -> None:
        """Delete a day and its stops."""
        async with self._session_factory() as session, session.begin():
            day = await self._require(session, TripDay, day_id, "Day not found")
            trip = await self._require(session, Trip, day.trip_id, "Trip not found")
            await session.execute(delete(TripDestination).where(TripDestination.day_id == day_id))
            await session.delete(day)
            await session.flush()
            self._renumber_days(trip, await self._days(session, trip.id, for_update=True))

    async def duplicate_day(self, day_id: str) -> DayRecord:
        """Copy a day and its stops right after the original."""
        async with self._session_factory() as session, session.begin():
            original = await self._require(session, TripDay, day_id, "Day not found")
            trip = await self._require(session, Trip, original.trip_id, "Trip not found")
            days = await self._days(session, trip.id, for_update=True)

            clone = TripDay(
                id=str(uuid.uuid4()),
                trip_id=trip.id,
                day_order=0,
                base_locations=list(original.base_locations or []),
            )
            session.add(clone)
            for stop in await self._stops(session, day_id):
                session.add(
                    TripDestination(
                        id=str(uuid.uuid4()),
                        day_id=clone.id,
                        name=stop.name,
                        order_index=stop.order_index,
                        category=stop.category,
                        city=stop.city,
                        notes=stop.notes,
                        coordinates=stop.coordinates,
                        estimated_duration_minutes=stop.estimated_duration_minutes,
                        start_time_iso=stop.start_time_iso,
                        end_time_iso=stop.end_time_iso,
                        links=stop.links,
                    )
                )

            days.insert(days.index(original) + 1, clone)
            self._renumber_days(trip, days)
            await session.flush()
            return _day_record(clone)

    async def update_trip_dates(self, trip_id: str, start_date: date, end_date: date) -> None:
        """Set the trip date range and re-date its days."""
        async with self._session_factory() as session, session.begin():
            trip = await self._require(session, Trip, trip_id, "Trip not found")
            trip.start_date = start_date
            trip.end_date = end_date
            self._renumber_days(trip, await self._days(session, trip_id, for_update=True))

    # Internals

    @staticmethod
    async def _require(session: AsyncSession, model: Any, key: str, message: str) -> Any:
        row = await session.get(model, key)
        if row is None:
            raise NotFoundError(message)
        return row

    @staticmethod
    async def _days(session: AsyncSession, trip_id: str, for_update: bool = False) -> list[TripDay]:
        query = select(TripDay).where(TripDay.trip_id == trip_id).order_by(TripDay.day_order)
        if for_update:
            query = query.with_for_update()
        result = await session.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def _stops(session: AsyncSession, day_id: str) -> list[TripDestination]:
        result = await session.execute(
            select(TripDestination)
            .where(TripDestination.day_id == day_id)
            .order_by(TripDestination.order_index)
        )
        return list(result.scalars().all())

    @staticmethod
    def _renumber_stops(stops: list[TripDestination]) -> None:
        for index, stop in enumerate(stops):
            stop.order_index = index

    @staticmethod
    def _renumber_days(trip: Trip, days: list[TripDay]) -> None:
        for order, day in enumerate(days, start=1):
            day.day_order = order
            if trip.start_date is not None:
                day.day_date = day_date_for(trip.start_date, order)
        trip.end_date = extended_end_date(trip.start_date, trip.end_date, len(days))
