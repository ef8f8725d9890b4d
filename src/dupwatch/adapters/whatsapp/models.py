"""Modelos de entrada vindos da automação do WhatsApp Web."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo

from pydantic import BaseModel, Field

from dupwatch.adapters.whatsapp.pre_plain_text import parse_pre_plain_text
from dupwatch.domain.models import ChatEvent


class InboundChatEvent(BaseModel):
    """Última mensagem lida do grupo.

    `observed_at` tem precedência; sem ele, tenta `pre_plain_text`; sem
    nenhum dos dois, vale o horário de recebimento.
    """

    event_id: str = Field(min_length=1, max_length=512)  # data-id da linha
    text: str = Field(default="", max_length=4096)
    observed_at: datetime | None = None
    pre_plain_text: str | None = Field(default=None, max_length=1024)

    def to_event(self, tz: tzinfo, received_at: datetime | None = None) -> ChatEvent:
        """Converte para o evento de domínio, resolvendo o instante."""
        now = received_at or datetime.now(tz=UTC)
        observed = self.observed_at
        if observed is not None and observed.tzinfo is None:
            observed = observed.replace(tzinfo=tz)
        if observed is None:
            observed = parse_pre_plain_text(self.pre_plain_text, now, tz)
        if observed is None:
            observed = now
        return ChatEvent(event_id=self.event_id, text=self.text, observed_at=observed)
