"""Fronteiras externas: fonte de eventos e destino das respostas."""

from __future__ import annotations

from abc import ABC, abstractmethod

from dupwatch.domain.models import ChatEvent, DuplicateReply


class ReplySinkError(Exception):
    """Falha ao entregar uma resposta. Nunca desfaz o histórico."""

    pass


class EventSource(ABC):
    """Entrega o próximo evento disponível, sem bloquear indefinidamente."""

    @abstractmethod
    async def next_event(self, timeout: float) -> ChatEvent | None:
        """Aguarda até `timeout` segundos por um evento.

        Returns:
            O evento, ou None se nada chegou no intervalo
        """
        ...


class ReplySink(ABC):
    """Recebe as repetições detectadas (fire-and-forget)."""

    @abstractmethod
    async def on_duplicate_detected(self, reply: DuplicateReply) -> None:
        """Entrega a resposta.

        Raises:
            ReplySinkError: Em falha de entrega (logada pelo runner)
        """
        ...
