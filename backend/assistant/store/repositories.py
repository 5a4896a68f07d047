"""Trip store protocol - the persistence collaborator the executor mutates.

Each mutation is atomic: it either applies completely or leaves the trip untouched.
Implementations serialise mutations against the same trip; the action layer performs no
locking of its own. Reads return ``None`` for unknown ids; mutations raise
``NotFoundError`` when a referenced row disappeared between check and write.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Protocol

from backend.assistant.models.common import DestinationChanges, DestinationInput


@dataclass
class TripRecord:
    """Trip owned by a single user."""

    id: str
    user_id: str
    name: str
    start_date: date | None = None
    end_date: date | None = None


@dataclass
class DayRecord:
    """One day of a trip; ``day_order`` is 1-based and contiguous."""

    id: str
    trip_id: str
    day_order: int
    day_date: date | None = None
    base_locations: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class DestinationRecord:
    """One stop on a day; ``order_index`` is 0-based and contiguous within the day."""

    id: str
    day_id: str
    name: str
    order_index: int
    category: str | None = None
    city: str | None = None
    notes: str | None = None
    coordinates: list[float] | None = None
    estimated_duration_minutes: int | None = None
    start_time_iso: str | None = None
    end_time_iso: str | None = None
    links: list[dict[str, Any]] | None = None


class TripStore(Protocol):
    """Repository for trip plan reads and per-entity mutations."""

    async def get_trip(self, trip_id: str) -> TripRecord | None:
        """Get trip by ID."""
        ...

    async def get_day(self, day_id: str) -> DayRecord | None:
        """Get day by ID."""
        ...

    async def get_destination(self, destination_id: str) -> DestinationRecord | None:
        """Get destination by ID."""
        ...

    async def list_days(self, trip_id: str) -> list[DayRecord]:
        """List days of a trip ordered by ``day_order``."""
        ...

    async def list_destinations(self, day_id: str) -> list[DestinationRecord]:
        """List stops of a day ordered by ``order_index``."""
        ...

    async def add_destination(
        self, day_id: str, destination: DestinationInput, insert_index: int
    ) -> DestinationRecord:
        """Insert a stop at ``insert_index``, shifting later stops down."""
        ...

    async def update_destination(
        self, destination_id: str, changes: DestinationChanges
    ) -> DestinationRecord:
        """Apply the non-null fields of ``changes``."""
        ...

    async def remove_destination(self, destination_id: str) -> None:
        """Delete a stop and close the gap in its day's ordering."""
        ...

    async def move_destination(
        self, destination_id: str, to_day_id: str, insert_index: int
    ) -> None:
        """Move a stop to ``insert_index`` of ``to_day_id`` (same day allowed)."""
        ...

    async def reorder_destinations(self, day_id: str, ordered_ids: list[str]) -> None:
        """Rewrite the ordering of a day's stops."""
        ...

    async def set_day_locations(self, day_id: str, locations: list[dict[str, Any]]) -> None:
        """Replace the base location list of a day."""
        ...

    async def add_day(self, trip_id: str, position: int) -> DayRecord:
        """Insert an empty day at 0-based ``position``."""
        ...

    async def remove_day(self, day_id: str) -> None:
        """Delete a day and its stops."""
        ...

    async def duplicate_day(self, day_id: str) -> DayRecord:
        """Copy a day, its stops and base locations right after the original."""
        ...

    async def update_trip_dates(self, trip_id: str, start_date: date, end_date: date) -> None:
        """Set the trip date range and re-date its days from ``start_date``."""
        ...
