"""Destinos das respostas de repetição.

A entrega real no chat é externa; aqui ficam o sink de log (padrão) e
um sink HTTP que repassa a resposta para quem opera o navegador.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from dupwatch.domain.models import DuplicateReply
from dupwatch.domain.protocols.io import ReplySink, ReplySinkError
from dupwatch.observability.logging import get_logger
from dupwatch.observability.middleware import get_correlation_id

if TYPE_CHECKING:
    from dupwatch.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


class LoggingReplySink(ReplySink):
    """Apenas registra a repetição (sem o texto, só metadados)."""

    async def on_duplicate_detected(self, reply: DuplicateReply) -> None:
        logger.info(
            "duplicate_detected",
            extra={
                "prior_count": len(reply.prior),
                "text_length": len(reply.original_text),
            },
        )


class HttpReplySink(ReplySink):
    """POST de {text, times, reply} para um webhook configurado."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout_seconds
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def on_duplicate_detected(self, reply: DuplicateReply) -> None:
        payload = {
            "text": reply.original_text,
            "times": reply.formatted_times,
            "reply": reply.reply_text,
        }
        headers = {"x-correlation-id": get_correlation_id()}
        try:
            response = await self._get_client().post(self._url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(
                "Falha de rede ao entregar resposta",
                extra={"error_type": type(e).__name__},
            )
            raise ReplySinkError(f"Falha ao entregar resposta: {type(e).__name__}") from e

        if response.status_code >= 400:
            logger.warning(
                "Webhook de resposta recusou a entrega",
                extra={"status_code": response.status_code},
            )
            raise ReplySinkError(f"Webhook respondeu {response.status_code}")

        logger.debug("Resposta entregue", extra={"status_code": response.status_code})

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def create_reply_sink(settings: Settings) -> ReplySink:
    """HTTP se REPLY_WEBHOOK_URL estiver configurado; log caso contrário."""
    if settings.reply_webhook_url:
        logger.info("Usando HttpReplySink")
        return HttpReplySink(
            settings.reply_webhook_url,
            timeout_seconds=settings.reply_webhook_timeout_seconds,
        )
    logger.info("Usando LoggingReplySink")
    return LoggingReplySink()
