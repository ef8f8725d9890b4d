"""Engine de detecção de repetições no dia.

Fluxo por evento (event_id, text, observed_at):
1. Virada de dia: se o limite de hoje é posterior ao da última evicção,
   evict + limpa filtro de ids
2. event_id já visto → REJECTED
3. Texto vazio ou com mais de max_words palavras → REJECTED
4. prior = lookup(chave)
5. append + persistência (write-through, ou adiada até flush_async()
   quando write_through=False; o runner usa o modo adiado para não
   bloquear o event loop)
6. prior não vazio → REPLY_EMITTED, senão NO_ACTION

O engine é o único escritor do histórico e do filtro. Não é thread-safe:
quem o chama (DedupRunner) garante a execução sequencial.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from dupwatch.application.reply_formatting import ReplyFormat, build_reply
from dupwatch.application.state import DedupState
from dupwatch.domain.clock import MidnightClock
from dupwatch.domain.history import HistoryStore, HistoryTable
from dupwatch.domain.models import (
    ChatEvent,
    DedupDecision,
    EvictionResult,
    Outcome,
    RejectReason,
)
from dupwatch.domain.protocols.persistence import (
    HistoryPersistence,
    LoadResult,
    PersistenceError,
)
from dupwatch.domain.seen_events import SeenEventFilter
from dupwatch.domain.text import history_key, normalize_text, split_words
from dupwatch.observability.logging import get_logger
from dupwatch.observability.timing import timed

if TYPE_CHECKING:
    from dupwatch.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


class DedupEngine:
    """Decide, para cada evento, se é repetição do dia."""

    def __init__(
        self,
        clock: MidnightClock,
        persistence: HistoryPersistence,
        reply_format: ReplyFormat,
        max_words: int = 3,
        state: DedupState | None = None,
        write_through: bool = True,
    ) -> None:
        self._clock = clock
        self._persistence = persistence
        self._reply_format = reply_format
        self._max_words = max_words
        self._state = state or DedupState()
        self._persist_failures = 0
        self._write_through = write_through
        self._dirty = False
        self._inflight: asyncio.Future[bool] | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        persistence: HistoryPersistence,
        now_fn: Callable[[], datetime] | None = None,
        write_through: bool = True,
    ) -> DedupEngine:
        """Monta o engine com fuso, limites e formato vindos das settings."""
        clock = MidnightClock(tz=settings.tzinfo)
        if now_fn is not None:
            clock.now_fn = now_fn
        state = DedupState(
            history=HistoryStore(),
            seen=SeenEventFilter(max_size=settings.seen_ids_max),
        )
        return cls(
            clock=clock,
            persistence=persistence,
            reply_format=ReplyFormat.from_settings(settings),
            max_words=settings.max_words,
            state=state,
            write_through=write_through,
        )

    @property
    def state(self) -> DedupState:
        return self._state

    @property
    def history(self) -> HistoryStore:
        return self._state.history

    @property
    def clock(self) -> MidnightClock:
        return self._clock

    @property
    def persist_failures(self) -> int:
        """Quantidade de saves que falharam desde o startup."""
        return self._persist_failures

    @property
    def has_pending_save(self) -> bool:
        return self._dirty

    def start(self) -> LoadResult:
        """Carrega o histórico persistido e aplica a poda do dia.

        Entradas de dias anteriores nunca sobrevivem a um restart.
        """
        result = self._persistence.load()
        self._state.history.replace(result.table)
        self._state.last_eviction = None
        logger.info(
            "engine_started",
            extra={"fresh_start": result.fresh_start, "keys": len(self._state.history)},
        )
        self.check_rollover()
        self.flush()
        return result

    def check_rollover(self, now: datetime | None = None) -> EvictionResult | None:
        """Evicta e zera o filtro de ids se um novo dia começou.

        Chamado antes de cada evento e também periodicamente pelo runner.

        Returns:
            Resultado da evicção, ou None se o dia não virou
        """
        today = self._clock.boundary(now)
        last = self._state.last_eviction
        if last is not None and today <= last:
            return None

        result = self._state.history.evict(today)
        self._state.seen.clear()
        self._state.last_eviction = today
        logger.info(
            "day_rollover",
            extra={
                "boundary": today.isoformat(),
                "previous_boundary": last.isoformat() if last else None,
                "removed": result.removed,
                "retained": result.retained,
            },
        )
        self._persist()
        return result

    def process(self, event: ChatEvent) -> DedupDecision:
        """Processa um evento até o fim (sem interrupção)."""
        self.check_rollover()

        if not self._state.seen.add(event.event_id):
            logger.debug("event_rejected", extra={"event_id": event.event_id, "reason": "seen"})
            return DedupDecision(outcome=Outcome.REJECTED, reason=RejectReason.SEEN_EVENT)

        words = split_words(event.text)
        if not words:
            logger.debug("event_rejected", extra={"event_id": event.event_id, "reason": "empty"})
            return DedupDecision(outcome=Outcome.REJECTED, reason=RejectReason.EMPTY_TEXT)
        if len(words) > self._max_words:
            logger.debug(
                "event_rejected",
                extra={"event_id": event.event_id, "reason": "too_many_words", "words": len(words)},
            )
            return DedupDecision(outcome=Outcome.REJECTED, reason=RejectReason.TOO_MANY_WORDS)

        observed_at = event.observed_at
        if observed_at.tzinfo is None:
            # Sem fuso explícito, o horário é de parede no fuso configurado
            observed_at = observed_at.replace(tzinfo=self._clock.tz)

        boundary = self._state.last_eviction
        if boundary is not None and observed_at < boundary:
            logger.info(
                "event_rejected",
                extra={"event_id": event.event_id, "reason": "stale", "boundary": boundary.isoformat()},
            )
            return DedupDecision(outcome=Outcome.REJECTED, reason=RejectReason.STALE_EVENT)

        key = history_key(event.text)
        prior = self._state.history.lookup(key)
        self._state.history.append(key, observed_at.astimezone(UTC))
        self._persist()

        if not prior:
            logger.debug("first_occurrence", extra={"event_id": event.event_id})
            return DedupDecision(outcome=Outcome.NO_ACTION, key=key)

        reply = build_reply(normalize_text(event.text), prior, self._reply_format)
        logger.info(
            "duplicate_found",
            extra={"event_id": event.event_id, "prior_count": len(prior)},
        )
        return DedupDecision(outcome=Outcome.REPLY_EMITTED, reply=reply, key=key)

    def flush(self) -> bool:
        """Salva o histórico se houver mudança pendente.

        Returns:
            False se o save falhou (a mudança continua pendente)
        """
        if not self._dirty:
            return True
        self._dirty = False
        return self._save(self._state.history.snapshot())

    async def flush_async(self) -> bool:
        """Como flush(), mas com o I/O fora do event loop.

        O snapshot é tirado no loop; só a gravação vai para a thread. Um
        save interrompido por cancelamento continua na thread e é aguardado
        antes do próximo; um snapshot antigo nunca sobrescreve um mais novo.
        """
        if self._inflight is not None and not self._inflight.done():
            await asyncio.wait({self._inflight})
        if not self._dirty:
            return True
        self._dirty = False
        self._inflight = asyncio.ensure_future(
            asyncio.to_thread(self._save, self._state.history.snapshot())
        )
        return await asyncio.shield(self._inflight)

    def _persist(self) -> None:
        self._dirty = True
        if self._write_through:
            self.flush()

    def _save(self, table: HistoryTable) -> bool:
        """Falha é logada e não desfaz o estado em memória."""
        try:
            with timed("history_persist"):
                self._persistence.save(table)
        except PersistenceError as e:
            self._dirty = True
            self._persist_failures += 1
            logger.warning(
                "history_persist_failed",
                extra={"error": str(e), "failures": self._persist_failures},
            )
            return False
        return True
