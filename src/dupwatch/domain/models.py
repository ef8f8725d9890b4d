"""Tipos de domínio do detector de repetições."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(slots=True, frozen=True)
class ChatEvent:
    """Evento entregue pela fonte externa (ex.: automação do WhatsApp Web)."""

    event_id: str
    text: str
    observed_at: datetime


class Outcome(str, Enum):
    """Resultado final de um ciclo do engine."""

    REPLY_EMITTED = "reply_emitted"
    NO_ACTION = "no_action"
    REJECTED = "rejected"


class RejectReason(str, Enum):
    """Motivo de rejeição (apenas observabilidade)."""

    SEEN_EVENT = "seen_event"
    EMPTY_TEXT = "empty_text"
    TOO_MANY_WORDS = "too_many_words"
    STALE_EVENT = "stale_event"


@dataclass(slots=True, frozen=True)
class DuplicateReply:
    """Resposta a ser entregue ao sink quando há repetição."""

    original_text: str
    formatted_times: str
    reply_text: str
    prior: tuple[datetime, ...] = ()


@dataclass(slots=True, frozen=True)
class DedupDecision:
    """Decisão do engine para um evento."""

    outcome: Outcome
    reply: DuplicateReply | None = None
    reason: RejectReason | None = None
    key: str | None = None

    @property
    def should_reply(self) -> bool:
        return self.outcome is Outcome.REPLY_EMITTED


@dataclass(slots=True, frozen=True)
class EvictionResult:
    """Contagem de chaves removidas/retidas numa varredura."""

    removed: int = 0
    retained: int = 0
    removed_keys: tuple[str, ...] = field(default=(), repr=False)
