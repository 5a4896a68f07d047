"""Prometheus metrics for the assistant action pipeline."""

from prometheus_client import Counter, Histogram

# Action execution metrics
assistant_actions_total = Counter(
    "assistant_actions_total",
    "Assistant action attempts by type and outcome",
    ["action_type", "outcome"],
)

assistant_action_latency_ms = Histogram(
    "assistant_action_latency_ms",
    "Assistant action execution latency in milliseconds",
    ["action_type", "outcome"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)

# Best-effort log writes
assistant_log_write_failures_total = Counter(
    "assistant_log_write_failures_total",
    "Audit/telemetry writes that failed and were dropped",
    ["stream"],
)

# Prompt guard
prompt_guard_blocks_total = Counter(
    "prompt_guard_blocks_total",
    "Raw inputs blocked by the prompt guard",
    ["reason"],
)


class PrometheusActionMetrics:
    """Prometheus-based action metrics implementation."""

    def record_attempt(self, action_type: str, outcome: str, latency_ms: float) -> None:
        """Count an action attempt and observe its latency."""
        assistant_actions_total.labels(action_type=action_type, outcome=outcome).inc()
        assistant_action_latency_ms.labels(action_type=action_type, outcome=outcome).observe(
            latency_ms
        )

    def inc_write_failure(self, stream: str) -> None:
        """Increment dropped log write counter."""
        assistant_log_write_failures_total.labels(stream=stream).inc()
