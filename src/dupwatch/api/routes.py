"""Rotas HTTP: healthcheck e ingestão de eventos do grupo."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from dupwatch.adapters.whatsapp.models import InboundChatEvent
from dupwatch.api.dependencies import get_event_source, get_runner, get_settings
from dupwatch.application.runner import DedupRunner
from dupwatch.config.settings import Settings
from dupwatch.infra.event_queue import EventQueueFullError, QueueEventSource
from dupwatch.observability.logging import get_logger
from dupwatch.observability.middleware import get_correlation_id

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health(
    settings: Settings = Depends(get_settings),
    runner: DedupRunner = Depends(get_runner),
    source: QueueEventSource = Depends(get_event_source),
) -> dict[str, Any]:
    """Healthcheck com métricas mínimas do histórico."""
    state = runner.engine.state
    return {
        "status": "ok",
        "service": settings.service_name,
        "version": settings.version,
        "runner_running": runner.running,
        "tracked_keys": len(state.history),
        "seen_events": len(state.seen),
        "last_eviction": state.last_eviction.isoformat() if state.last_eviction else None,
        "persist_failures": runner.engine.persist_failures,
        "queue_size": source.qsize(),
    }


@router.post("/events", status_code=status.HTTP_202_ACCEPTED)
async def ingest_event(
    payload: InboundChatEvent,
    settings: Settings = Depends(get_settings),
    source: QueueEventSource = Depends(get_event_source),
) -> dict[str, Any]:
    """Recebe a última mensagem lida do grupo e apenas enfileira."""
    event = payload.to_event(settings.tzinfo)
    correlation_id = get_correlation_id()
    try:
        source.submit(event)
    except EventQueueFullError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "event_queue_full", "correlation_id": correlation_id},
        ) from exc

    logger.info("event_accepted", extra={"event_id": event.event_id})
    return {"accepted": True, "event_id": event.event_id, "correlation_id": correlation_id}
