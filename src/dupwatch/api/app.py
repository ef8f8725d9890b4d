"""Fábrica da aplicação FastAPI.

Uso:
    uvicorn --factory dupwatch.api.app:create_app
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI

from dupwatch.api.routes import router
from dupwatch.application.engine import DedupEngine
from dupwatch.application.runner import DedupRunner
from dupwatch.config.settings import Settings, get_settings
from dupwatch.domain.protocols.io import ReplySink
from dupwatch.domain.protocols.persistence import HistoryPersistence
from dupwatch.infra.event_queue import QueueEventSource
from dupwatch.infra.history_factory import create_history_persistence
from dupwatch.infra.reply_sink import HttpReplySink, create_reply_sink
from dupwatch.observability.logging import configure_logging, get_logger
from dupwatch.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    runner: DedupRunner = app.state.runner
    runner.engine.start()
    runner.start()
    try:
        yield
    finally:
        await runner.stop()
        sink = app.state.reply_sink
        if isinstance(sink, HttpReplySink):
            await sink.aclose()


def create_app(
    settings: Settings | None = None,
    *,
    persistence: HistoryPersistence | None = None,
    reply_sink: ReplySink | None = None,
    now_fn: Callable[[], datetime] | None = None,
) -> FastAPI:
    """Cria a aplicação; valida configuração antes de montar o engine."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name, settings.log_format)

    validation_errors = settings.validation_errors()
    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida ({settings.environment}): {error_msg}")

    persistence = persistence or create_history_persistence(settings)
    reply_sink = reply_sink or create_reply_sink(settings)
    event_source = QueueEventSource(maxsize=settings.event_queue_maxsize)
    engine = DedupEngine.from_settings(settings, persistence, now_fn=now_fn, write_through=False)
    runner = DedupRunner(
        engine=engine,
        source=event_source,
        sink=reply_sink,
        check_interval_seconds=settings.check_interval_seconds,
    )

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=_lifespan)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)

    app.state.settings = settings
    app.state.event_source = event_source
    app.state.reply_sink = reply_sink
    app.state.runner = runner

    logger.info(
        "app_created",
        extra={"timezone": settings.timezone, "history_backend": settings.history_backend},
    )
    return app
