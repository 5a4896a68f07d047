"""FastAPI application for the assistant action pipeline."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.assistant.actions.service import ActionService
from backend.assistant.api.routes.actions import router as actions_router
from backend.assistant.api.routes.health import router as health_router
from backend.assistant.api.routes.metrics import router as metrics_router
from backend.assistant.api.routes.screen import router as screen_router
from backend.assistant.audit.recorder import AuditRecorder, TelemetryRecorder
from backend.assistant.audit.sinks import InMemoryLogSink, LogSink, SqlLogSink
from backend.assistant.config import Settings, load_settings
from backend.assistant.db.engine import create_async_engine_from_settings, create_session_factory
from backend.assistant.errors import (
    ActionError,
    UnauthorizedError,
    ValidationError,
    error_body,
    status_for_error,
)
from backend.assistant.store.inmemory import InMemoryTripStore
from backend.assistant.store.repositories import TripStore
from backend.assistant.store.sql import SqlTripStore
from backend.assistant.turns import AssistantTurnService
from backend.assistant.utils.logging import configure_logging

logger = logging.getLogger(__name__)


async def handle_action_error(request: Request, exc: Exception) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=status_for_error(exc), content=error_body(exc), headers=headers
    )


async def handle_request_validation_error(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    wrapped = ValidationError(
        "invalid request body",
        errors=[{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors],
    )
    return await handle_action_error(request, wrapped)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.url.path}",
        exc_info=exc,
        extra={"structured": {"path": request.url.path, "error": type(exc).__name__}},
    )
    return await handle_action_error(request, exc)


def create_app(
    settings: Settings | None = None,
    store: TripStore | None = None,
    sink: LogSink | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Explicit settings (defaults to ``load_settings()``)
        store: Trip store (defaults to SQL when ``database_url`` is set, else in-memory)
        sink: Audit/telemetry sink (defaults to match the store backend)

    Returns:
        FastAPI app with services on ``app.state``
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    engine = None
    if settings.database_url and (store is None or sink is None):
        engine = create_async_engine_from_settings(settings)
        session_factory = create_session_factory(engine)
        store = store or SqlTripStore(session_factory)
        sink = sink or SqlLogSink(session_factory)

    store = store or InMemoryTripStore()
    sink = sink or InMemoryLogSink()

    audit = AuditRecorder(sink, enabled=settings.audit_enabled)
    telemetry = TelemetryRecorder(sink)

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Assistant API starting",
            extra={"structured": {"store": type(store).__name__, "sink": type(sink).__name__}},
        )
        yield
        # Flush best-effort writes before the pool goes away
        await audit.drain()
        await telemetry.drain()
        if engine is not None:
            await engine.dispose()

    app = FastAPI(title="Trip Assistant Actions API", version="0.1.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.store = store
    app.state.sink = sink
    app.state.audit = audit
    app.state.telemetry = telemetry
    app.state.action_service = ActionService(store, audit, settings)
    app.state.turn_service = AssistantTurnService(telemetry, settings)

    app.add_exception_handler(ActionError, handle_action_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(actions_router, tags=["actions"])
    app.include_router(screen_router, tags=["assistant"])

    return app


app = create_app()
