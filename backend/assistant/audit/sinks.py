"""Log sinks - append-only destinations for audit and telemetry records."""

from datetime import UTC, datetime
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.assistant.db.models import AssistantActionLog, AssistantLog
from backend.assistant.models.records import AuditRecord, TelemetryRecord


class LogSink(Protocol):
    """Append-only log storage."""

    async def write_action(self, record: AuditRecord) -> None:
        """Append one action audit entry."""
        ...

    async def write_telemetry(self, record: TelemetryRecord) -> None:
        """Append one assistant turn telemetry entry."""
        ...


class InMemoryLogSink:
    """In-memory implementation of LogSink."""

    def __init__(self) -> None:
        self.actions: list[dict[str, Any]] = []
        self.telemetry: list[dict[str, Any]] = []

    async def write_action(self, record: AuditRecord) -> None:
        entry = record.model_dump(mode="json")
        entry["created_at"] = datetime.now(UTC)
        self.actions.append(entry)

    async def write_telemetry(self, record: TelemetryRecord) -> None:
        entry = record.model_dump(mode="json")
        entry["created_at"] = datetime.now(UTC)
        self.telemetry.append(entry)


class SqlLogSink:
    """SQL implementation of LogSink (assistant_action_logs / assistant_logs)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def write_action(self, record: AuditRecord) -> None:
        async with self._session_factory() as session, session.begin():
            session.add(
                AssistantActionLog(
                    event_type=record.event.value,
                    user_id=record.user_id,
                    action_type=record.action_type,
                    summary=record.summary,
                    payload=record.payload,
                )
            )

    async def write_telemetry(self, record: TelemetryRecord) -> None:
        async with self._session_factory() as session, session.begin():
            session.add(
                AssistantLog(
                    user_id=record.user_id,
                    conversation_id=record.conversation_id,
                    message_id=record.message_id,
                    model=record.model,
                    prompt_tokens=record.prompt_tokens,
                    completion_tokens=record.completion_tokens,
                    total_tokens=record.total_tokens,
                    cost_usd=record.cost_usd,
                    blocked=record.blocked,
                    block_reason=record.block_reason,
                )
            )
