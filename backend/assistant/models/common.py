"""Common types shared across action models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# [lng, lat] pair as stored by the map layer
Coordinates = tuple[float, float]


class WireModel(BaseModel):
    """Base model for payloads exchanged with the assistant and the UI.

    Accepts camelCase keys on input (``dayId``) as well as field names (``day_id``) and
    serializes with camelCase when dumped ``by_alias``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 date-time, accepting a trailing ``Z`` for UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


class ActionSource(str, Enum):
    """Who proposed the action."""

    assistant = "assistant"
    user = "user"


class ActionMetadata(WireModel):
    """Optional metadata attached by the assistant to any intent."""

    action_id: UUID | None = None
    confidence: float | None = Field(default=None, ge=0, le=1, strict=True)
    summary: str | None = Field(default=None, min_length=1, max_length=320)
    source: ActionSource = ActionSource.assistant


class DestinationLink(WireModel):
    """External link shown on a destination card."""

    label: str = Field(..., min_length=1, max_length=48)
    url: AnyHttpUrl


class DestinationFields(WireModel):
    """Optional destination fields shared by create and update payloads."""

    category: str | None = Field(default=None, min_length=1, max_length=48)
    city: str | None = Field(default=None, min_length=1, max_length=120)
    notes: str | None = Field(default=None, min_length=1, max_length=2000)
    coordinates: Coordinates | None = None
    estimated_duration_minutes: int | None = Field(default=None, gt=0, le=24 * 60, strict=True)
    start_time_iso: str | None = Field(default=None, min_length=1)
    end_time_iso: str | None = Field(default=None, min_length=1)
    links: list[DestinationLink] | None = Field(default=None, max_length=6)

    @field_validator("start_time_iso", "end_time_iso")
    @classmethod
    def validate_iso_datetime(cls, v: str | None) -> str | None:
        """Ensure timestamps are valid ISO 8601 date-times."""
        if v is None:
            return v
        try:
            parse_iso_datetime(v)
        except ValueError as e:
            raise ValueError("Must be a valid ISO 8601 date-time string") from e
        return v


class DestinationInput(DestinationFields):
    """Destination to add to a day."""

    name: str = Field(..., min_length=1, max_length=160)


class DestinationChanges(DestinationFields):
    """Partial destination update; at least one field must be set."""

    name: str | None = Field(default=None, min_length=1, max_length=160)

    def changed_fields(self) -> list[str]:
        """Field names explicitly provided with a non-null value, in declaration order."""
        return [
            name
            for name in type(self).model_fields
            if name in self.model_fields_set and getattr(self, name) is not None
        ]

    @model_validator(mode="after")
    def validate_not_empty(self) -> "DestinationChanges":
        """Ensure the update changes something."""
        if not self.changed_fields():
            raise ValueError("At least one field must be provided to update.")
        return self


class BaseLocationInput(WireModel):
    """Where the traveller stays on a given day."""

    name: str = Field(..., min_length=1, max_length=160)
    coordinates: Coordinates | None = None
    context: str | None = Field(default=None, min_length=1, max_length=2000)
    notes: str | None = Field(default=None, min_length=1, max_length=2000)
    links: list[DestinationLink] | None = Field(default=None, max_length=6)
