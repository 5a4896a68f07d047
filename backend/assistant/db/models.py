"""SQLAlchemy ORM models for trips and assistant logs."""

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


def _uuid_str() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Trip(Base):
    """Trip table - owned by one user."""

    __tablename__ = "trip"
    __table_args__ = (Index("idx_trip_user", "user_id"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid_str)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class TripDay(Base):
    """Trip day table - contiguous 1-based ordering per trip."""

    __tablename__ = "trip_day"
    __table_args__ = (Index("idx_trip_day_trip_order", "trip_id", "day_order"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid_str)
    trip_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("trip.id", ondelete="CASCADE"), nullable=False
    )
    day_order: Mapped[int] = mapped_column(Integer, nullable=False)
    day_date: Mapped[date | None] = mapped_column("date", Date, nullable=True)
    base_locations: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )


class TripDestination(Base):
    """Trip destination table - contiguous 0-based ordering per day."""

    __tablename__ = "trip_destination"
    __table_args__ = (Index("idx_trip_destination_day_order", "day_id", "order_index"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid_str)
    day_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("trip_day.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    coordinates: Mapped[list[float] | None] = mapped_column(JSON, nullable=True)
    estimated_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    start_time_iso: Mapped[str | None] = mapped_column(Text, nullable=True)
    end_time_iso: Mapped[str | None] = mapped_column(Text, nullable=True)
    links: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)


class AssistantActionLog(Base):
    """Append-only audit of action previews and executions."""

    __tablename__ = "assistant_action_logs"
    __table_args__ = (Index("idx_action_log_user_created", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid_str)
    event_type: Mapped[str] = mapped_column(String(16), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    action_type: Mapped[str] = mapped_column(String(64), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class AssistantLog(Base):
    """Append-only telemetry of assistant turns."""

    __tablename__ = "assistant_logs"
    __table_args__ = (Index("idx_assistant_log_user_created", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid_str)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    conversation_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    message_id: Mapped[str] = mapped_column(String(64), nullable=False)
    model: Mapped[str] = mapped_column(String(64), nullable=False)
    prompt_tokens: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completion_tokens: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_tokens: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cost_usd: Mapped[float | None] = mapped_column(Numeric(10, 6), nullable=True)
    blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    block_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
