"""Structured logging for assistant action execution."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Set the level of the ``backend.assistant`` logger tree."""
    logging.getLogger("backend.assistant").setLevel(level.upper())


class StructuredActionLogger:
    """Structured logger for action attempts."""

    def log_attempt(
        self,
        user_id: str,
        action_type: str,
        outcome: str,
        latency_ms: float,
        summary: str | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log an action attempt with structured data."""
        log_data: dict[str, Any] = {
            "user_id": user_id,
            "action_type": action_type,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if summary:
            log_data["summary"] = summary
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Assistant action: {action_type} - {outcome}"

        if outcome == "applied":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_batch_aborted(
        self, user_id: str, applied: int, total: int, failed_action_type: str, error: str
    ) -> None:
        """Log a fail-fast batch stop; already applied intents are not rolled back."""
        logger.warning(
            f"Assistant batch aborted after {applied} of {total} actions",
            extra={
                "structured": {
                    "user_id": user_id,
                    "applied": applied,
                    "total": total,
                    "failed_action_type": failed_action_type,
                    "error": error,
                }
            },
        )
