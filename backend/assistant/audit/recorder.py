"""Best-effort background recorders for audit and telemetry.

A write is scheduled as an asyncio task and the caller returns immediately. Pending
tasks are held in a set until they finish. A failed write is logged, counted in
``assistant_log_write_failures_total{stream}`` and dropped; it never reaches the caller.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from backend.assistant.audit.sinks import LogSink
from backend.assistant.models.records import AuditRecord, TelemetryRecord
from backend.assistant.utils.metrics import PrometheusActionMetrics

logger = logging.getLogger(__name__)


class BackgroundRecorder:
    """Schedules sink writes without awaiting them."""

    stream = "log"

    def __init__(
        self, sink: LogSink, metrics: PrometheusActionMetrics | None = None, enabled: bool = True
    ) -> None:
        self._sink = sink
        self._metrics = metrics or PrometheusActionMetrics()
        self._enabled = enabled
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _schedule(self, write: Coroutine[Any, Any, None], user_id: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            write.close()
            logger.warning(
                f"Dropped {self.stream} write: no running event loop",
                extra={"structured": {"stream": self.stream, "user_id": user_id}},
            )
            return

        task = loop.create_task(self._run(write, user_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run(self, write: Coroutine[Any, Any, None], user_id: str) -> None:
        try:
            await write
        except Exception as e:
            self._metrics.inc_write_failure(self.stream)
            logger.warning(
                f"Failed to write {self.stream} entry",
                extra={
                    "structured": {
                        "stream": self.stream,
                        "user_id": user_id,
                        "error": f"{type(e).__name__}: {e}",
                    }
                },
            )

    async def drain(self) -> None:
        """Wait for every outstanding write (shutdown and tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


class AuditRecorder(BackgroundRecorder):
    """Records action previews and executions."""

    stream = "audit"

    def record(self, record: AuditRecord) -> None:
        if not self._enabled:
            return
        self._schedule(self._sink.write_action(record), record.user_id)


class TelemetryRecorder(BackgroundRecorder):
    """Records assistant turns."""

    stream = "telemetry"

    def record(self, record: TelemetryRecord) -> None:
        if not self._enabled:
            return
        self._schedule(self._sink.write_telemetry(record), record.user_id)
