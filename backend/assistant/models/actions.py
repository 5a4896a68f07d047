"""Action intent models - the closed set of mutations the assistant may propose."""

from datetime import date
from typing import Annotated, Literal, Union

from pydantic import Field, StrictInt, ValidationInfo, field_validator

from backend.assistant.models.common import (
    ActionMetadata,
    BaseLocationInput,
    DestinationChanges,
    DestinationInput,
    WireModel,
)

IdStr = Annotated[str, Field(min_length=1)]
NonNegativeIndex = Annotated[StrictInt, Field(ge=0)]


class BaseIntent(WireModel):
    """Fields shared by every intent variant."""

    metadata: ActionMetadata | None = None


class AddDestinationAction(BaseIntent):
    """Add a new destination to a day."""

    type: Literal["add_destination"] = "add_destination"
    day_id: IdStr
    destination: DestinationInput
    insert_index: NonNegativeIndex | None = None


class UpdateDestinationAction(BaseIntent):
    """Change fields of an existing destination."""

    type: Literal["update_destination"] = "update_destination"
    day_id: IdStr
    destination_id: IdStr
    changes: DestinationChanges


class RemoveDestinationAction(BaseIntent):
    """Remove a destination from a day."""

    type: Literal["remove_destination"] = "remove_destination"
    day_id: IdStr
    destination_id: IdStr


class MoveDestinationAction(BaseIntent):
    """Move a destination to another day, or to another position on the same day."""

    type: Literal["move_destination"] = "move_destination"
    destination_id: IdStr
    from_day_id: IdStr
    to_day_id: IdStr
    insert_index: NonNegativeIndex | None = None

    @property
    def is_same_day(self) -> bool:
        return self.from_day_id == self.to_day_id


class ReorderDestinationsAction(BaseIntent):
    """Move the stop at ``from_index`` to ``to_index`` within one day."""

    type: Literal["reorder_destinations"] = "reorder_destinations"
    day_id: IdStr
    from_index: NonNegativeIndex
    to_index: NonNegativeIndex


class SetDayLocationAction(BaseIntent):
    """Set or add the base location (hotel, stay) for a day."""

    type: Literal["set_day_location"] = "set_day_location"
    day_id: IdStr
    location: BaseLocationInput
    replace_existing: bool = True
    location_index: NonNegativeIndex | None = None


class DuplicateDayAction(BaseIntent):
    """Copy a day and its stops right after the original."""

    type: Literal["duplicate_day"] = "duplicate_day"
    day_id: IdStr


class RemoveDayAction(BaseIntent):
    """Remove a day and all of its stops."""

    type: Literal["remove_day"] = "remove_day"
    day_id: IdStr


class AddDayAction(BaseIntent):
    """Add an empty day to a trip."""

    type: Literal["add_day"] = "add_day"
    trip_id: IdStr
    after_day_id: IdStr | None = None
    on_date: date | None = Field(default=None, alias="date")


class UpdateTripDatesAction(BaseIntent):
    """Change the date range of a trip."""

    type: Literal["update_trip_dates"] = "update_trip_dates"
    trip_id: IdStr
    start_date: date
    end_date: date

    @field_validator("end_date")
    @classmethod
    def validate_end_after_start(cls, v: date, info: ValidationInfo) -> date:
        """Ensure end >= start."""
        if "start_date" in info.data and v < info.data["start_date"]:
            raise ValueError("endDate must be >= startDate")
        return v


ActionIntent = Annotated[
    Union[
        AddDestinationAction,
        UpdateDestinationAction,
        RemoveDestinationAction,
        MoveDestinationAction,
        ReorderDestinationsAction,
        SetDayLocationAction,
        DuplicateDayAction,
        RemoveDayAction,
        AddDayAction,
        UpdateTripDatesAction,
    ],
    Field(discriminator="type"),
]

INTENT_MODELS: dict[str, type[BaseIntent]] = {
    "add_destination": AddDestinationAction,
    "update_destination": UpdateDestinationAction,
    "remove_destination": RemoveDestinationAction,
    "move_destination": MoveDestinationAction,
    "reorder_destinations": ReorderDestinationsAction,
    "set_day_location": SetDayLocationAction,
    "duplicate_day": DuplicateDayAction,
    "remove_day": RemoveDayAction,
    "add_day": AddDayAction,
    "update_trip_dates": UpdateTripDatesAction,
}

ACTION_TYPES: frozenset[str] = frozenset(INTENT_MODELS)


class PreviewEnvelope(WireModel):
    """Suggested action plus the assistant's rationale, as sent to the preview endpoint."""

    suggested_action: ActionIntent
    rationale: str | None = Field(default=None, min_length=1, max_length=2000)
