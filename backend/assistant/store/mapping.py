"""Conversions between action payload models and stored column values."""

from datetime import date, timedelta
from typing import Any

from backend.assistant.models.common import BaseLocationInput, DestinationChanges, DestinationInput


def destination_values(destination: DestinationInput) -> dict[str, Any]:
    """Column values for a new destination row."""
    return destination.model_dump(mode="json")


def change_values(changes: DestinationChanges) -> dict[str, Any]:
    """Column values for the fields an update actually sets."""
    return changes.model_dump(mode="json", include=set(changes.changed_fields()))


def location_value(location: BaseLocationInput) -> dict[str, Any]:
    """JSON entry for a day's base location list."""
    return location.model_dump(mode="json", exclude_none=True)


def day_date_for(start_date: date | None, day_order: int) -> date | None:
    """Date of the 1-based ``day_order`` when the trip has a start date."""
    if start_date is None:
        return None
    return start_date + timedelta(days=day_order - 1)


def extended_end_date(
    start_date: date | None, end_date: date | None, day_count: int
) -> date | None:
    """Trip end date, pushed out when days no longer fit inside the range."""
    if start_date is None:
        return end_date
    last_day = start_date + timedelta(days=max(day_count, 1) - 1)
    if end_date is None or end_date < last_day:
        return last_day
    return end_date
