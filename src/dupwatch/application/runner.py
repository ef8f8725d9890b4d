"""Loop consumidor único: fonte de eventos → engine → sink de respostas.

Toda mutação do histórico acontece aqui, em sequência. A espera pelo
próximo evento tem timeout igual ao intervalo de checagem, então a
virada de dia ocorre mesmo sem eventos perto da meia-noite. O save do
histórico roda numa thread (`flush_async`) para não travar a ingestão.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from dupwatch.application.engine import DedupEngine
from dupwatch.domain.models import DedupDecision, DuplicateReply
from dupwatch.domain.protocols.io import EventSource, ReplySink, ReplySinkError
from dupwatch.observability.logging import get_logger
from dupwatch.observability.middleware import correlation_scope

logger: logging.Logger = get_logger(__name__)


class DedupRunner:
    """Executa o engine sobre uma EventSource até ser parado."""

    def __init__(
        self,
        engine: DedupEngine,
        source: EventSource,
        sink: ReplySink,
        check_interval_seconds: float = 4.0,
    ) -> None:
        self._engine = engine
        self._source = source
        self._sink = sink
        self._interval = check_interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._deliveries: set[asyncio.Task[None]] = set()
        self._stopping = False

    @property
    def engine(self) -> DedupEngine:
        return self._engine

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> DedupDecision | None:
        """Um ciclo: checa virada de dia, aguarda um evento, processa.

        Returns:
            A decisão do engine, ou None se nenhum evento chegou
        """
        self._engine.check_rollover()
        await self._engine.flush_async()
        event = await self._source.next_event(timeout=self._interval)
        if event is None:
            return None

        with correlation_scope(event.event_id):
            decision = self._engine.process(event)
            await self._engine.flush_async()
            if decision.should_reply and decision.reply is not None:
                self._schedule_delivery(decision.reply)
        return decision

    async def run_forever(self) -> None:
        """Loop até stop(); erros de um ciclo não derrubam o loop."""
        logger.info("runner_started", extra={"check_interval_seconds": self._interval})
        while not self._stopping:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("runner_cycle_failed")
                await asyncio.sleep(self._interval)
        logger.info("runner_stopped")

    def start(self) -> asyncio.Task[None]:
        """Agenda run_forever no loop corrente."""
        if self.running:
            raise RuntimeError("DedupRunner já está em execução")
        self._stopping = False
        self._task = asyncio.create_task(self.run_forever(), name="dupwatch-runner")
        return self._task

    async def stop(self) -> None:
        """Para o loop, grava o histórico pendente e aguarda entregas."""
        self._stopping = True
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        # Cancelamento pode cair entre o append e o save
        await self._engine.flush_async()
        await self.drain()

    async def drain(self) -> None:
        """Aguarda todas as entregas de resposta em andamento."""
        if self._deliveries:
            await asyncio.gather(*list(self._deliveries), return_exceptions=True)

    def _schedule_delivery(self, reply: DuplicateReply) -> None:
        task = asyncio.create_task(self._deliver(reply))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def _deliver(self, reply: DuplicateReply) -> None:
        # Falha de entrega não desfaz o append já feito
        try:
            await self._sink.on_duplicate_detected(reply)
        except ReplySinkError as e:
            logger.warning("reply_delivery_failed", extra={"error": str(e)})
        except Exception:
            logger.exception("reply_delivery_crashed")
