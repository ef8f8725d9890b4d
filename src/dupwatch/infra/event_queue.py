"""Fila em memória entre a ingestão HTTP e o consumidor único.

A ingestão só enfileira; toda mutação do histórico acontece no runner.
Não há garantia de entrega: eventos na fila se perdem no restart.
"""

from __future__ import annotations

import asyncio
import logging

from dupwatch.domain.models import ChatEvent
from dupwatch.domain.protocols.io import EventSource
from dupwatch.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class EventQueueFullError(Exception):
    """Fila cheia; o chamador deve reenviar mais tarde."""

    pass


class QueueEventSource(EventSource):
    """EventSource sobre asyncio.Queue limitada."""

    def __init__(self, maxsize: int = 1000) -> None:
        self._queue: asyncio.Queue[ChatEvent] = asyncio.Queue(maxsize=maxsize)

    def submit(self, event: ChatEvent) -> None:
        """Enfileira sem bloquear.

        Raises:
            EventQueueFullError: Se a fila atingiu o limite
        """
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull as e:
            logger.warning("event_queue_full", extra={"maxsize": self._queue.maxsize})
            raise EventQueueFullError("Fila de eventos cheia") from e
        logger.debug("event_enqueued", extra={"event_id": event.event_id, "size": self.qsize()})

    async def next_event(self, timeout: float) -> ChatEvent | None:
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except TimeoutError:
            return None

    def qsize(self) -> int:
        return self._queue.qsize()
