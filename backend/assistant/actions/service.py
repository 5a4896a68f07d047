"""Action pipeline service - validate, preview, execute and audit.

Batches are applied in submission order and stop at the first failure. Intents already
applied stay applied: there is no rollback, and the caller receives only the first error.
"""

import logging
from typing import Any

from backend.assistant.actions.access import resolve_preview_context
from backend.assistant.actions.executor import ActionExecutor
from backend.assistant.actions.preview import build_preview
from backend.assistant.actions.schema import validate_preview_envelope, validate_request
from backend.assistant.audit.recorder import AuditRecorder
from backend.assistant.config import Settings
from backend.assistant.models.actions import ActionIntent
from backend.assistant.models.preview import BatchResult, PreviewResponse
from backend.assistant.models.records import AuditEvent, AuditRecord
from backend.assistant.store.repositories import TripStore
from backend.assistant.utils.logging import StructuredActionLogger
from backend.assistant.utils.metrics import PrometheusActionMetrics

logger = logging.getLogger(__name__)


def _action_payload(intent: ActionIntent) -> dict[str, Any]:
    return intent.model_dump(mode="json", by_alias=True, exclude_none=True)


class ActionService:
    """Entry point for the preview and execute routes."""

    def __init__(
        self,
        store: TripStore,
        audit: AuditRecorder,
        settings: Settings,
        metrics: PrometheusActionMetrics | None = None,
        action_logger: StructuredActionLogger | None = None,
    ) -> None:
        self._store = store
        self._audit = audit
        self._settings = settings
        self._action_logger = action_logger or StructuredActionLogger()
        self._executor = ActionExecutor(
            store,
            metrics=metrics or PrometheusActionMetrics(),
            logger=self._action_logger,
        )

    @property
    def executor(self) -> ActionExecutor:
        return self._executor

    async def submit_batch(self, user_id: str, raw_payload: Any) -> BatchResult:
        """Validate and apply a batch of intents for user_id.

        Args:
            user_id: Authenticated caller
            raw_payload: Decoded request body (``actions``, ``action`` or a bare intent)

        Returns:
            BatchResult with one past-tense summary per intent, in order

        Raises:
            ValidationError: Malformed payload (nothing applied) or a rejected intent
            NotFoundError / ForbiddenError: From the first failing intent
        """
        intents = validate_request(raw_payload, max_batch_size=self._settings.max_batch_size)

        summaries: list[str] = []
        for intent in intents:
            try:
                result = await self._executor.execute(user_id, intent)
            except Exception as e:
                self._audit.record(
                    AuditRecord(
                        event=AuditEvent.execute,
                        user_id=user_id,
                        action_type=intent.type,
                        summary=f"Failed {intent.type}",
                        payload={
                            "action": _action_payload(intent),
                            "outcome": "failed",
                            "error": str(e) or type(e).__name__,
                        },
                    )
                )
                if len(intents) > 1:
                    self._action_logger.log_batch_aborted(
                        user_id,
                        applied=len(summaries),
                        total=len(intents),
                        failed_action_type=intent.type,
                        error=type(e).__name__,
                    )
                raise

            summaries.append(result.summary)
            self._audit.record(
                AuditRecord(
                    event=AuditEvent.execute,
                    user_id=user_id,
                    action_type=intent.type,
                    summary=result.summary,
                    payload={"action": _action_payload(intent), "outcome": "applied"},
                )
            )

        return BatchResult(summaries=summaries)

    async def preview(self, user_id: str, raw_envelope: Any) -> PreviewResponse:
        """Validate a suggested intent and describe it without mutating anything.

        Raises:
            ValidationError: Malformed envelope or inconsistent references
            NotFoundError / ForbiddenError: Referenced entity missing or not owned
        """
        envelope = validate_preview_envelope(raw_envelope)
        intent = envelope.suggested_action

        context = await resolve_preview_context(self._store, user_id, intent)
        result = build_preview(intent, context)

        self._audit.record(
            AuditRecord(
                event=AuditEvent.preview,
                user_id=user_id,
                action_type=intent.type,
                summary=result.summary,
                payload={
                    "action": _action_payload(intent),
                    "details": result.details,
                    "rationale": envelope.rationale,
                },
            )
        )
        logger.info(
            f"Previewed {intent.type}",
            extra={"structured": {"user_id": user_id, "action_type": intent.type}},
        )
        return PreviewResponse(preview=result, rationale=envelope.rationale)
