"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - assistant_actions_total{action_type, outcome}
    - assistant_log_write_failures_total{stream}
    - prompt_guard_blocks_total{reason}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
