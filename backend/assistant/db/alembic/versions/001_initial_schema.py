"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-04-14

Creates:
- trip, trip_day, trip_destination
- assistant_action_logs, assistant_logs
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    # trip table
    op.create_table(
        "trip",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_trip_user", "trip", ["user_id"])

    # trip_day table
    op.create_table(
        "trip_day",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("trip_id", sa.String(64), nullable=False),
        sa.Column("day_order", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("base_locations", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["trip_id"], ["trip.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_trip_day_trip_order", "trip_day", ["trip_id", "day_order"])

    # trip_destination table
    op.create_table(
        "trip_destination",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("day_id", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("city", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("coordinates", sa.JSON(), nullable=True),
        sa.Column("estimated_duration_minutes", sa.Integer(), nullable=True),
        sa.Column("start_time_iso", sa.Text(), nullable=True),
        sa.Column("end_time_iso", sa.Text(), nullable=True),
        sa.Column("links", sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(["day_id"], ["trip_day.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_trip_destination_day_order", "trip_destination", ["day_id", "order_index"])

    # assistant_action_logs table (append-only)
    op.create_table(
        "assistant_action_logs",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("event_type", sa.String(16), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("action_type", sa.String(64), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_action_log_user_created", "assistant_action_logs", ["user_id", "created_at"])

    # assistant_logs table (append-only)
    op.create_table(
        "assistant_logs",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("conversation_id", sa.String(64), nullable=True),
        sa.Column("message_id", sa.String(64), nullable=False),
        sa.Column("model", sa.String(64), nullable=False),
        sa.Column("prompt_tokens", sa.Integer(), nullable=True),
        sa.Column("completion_tokens", sa.Integer(), nullable=True),
        sa.Column("total_tokens", sa.Integer(), nullable=True),
        sa.Column("cost_usd", sa.Numeric(10, 6), nullable=True),
        sa.Column("blocked", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("block_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_assistant_log_user_created", "assistant_logs", ["user_id", "created_at"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("idx_assistant_log_user_created", table_name="assistant_logs")
    op.drop_table("assistant_logs")
    op.drop_index("idx_action_log_user_created", table_name="assistant_action_logs")
    op.drop_table("assistant_action_logs")
    op.drop_index("idx_trip_destination_day_order", table_name="trip_destination")
    op.drop_table("trip_destination")
    op.drop_index("idx_trip_day_trip_order", table_name="trip_day")
    op.drop_table("trip_day")
    op.drop_index("idx_trip_user", table_name="trip")
    op.drop_table("trip")
