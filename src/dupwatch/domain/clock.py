"""Relógio da meia-noite local.

A janela diária é ancorada à meia-noite de parede do fuso configurado,
nunca a "último limite + 24h". Assim dias de 23h/25h (horário de verão)
são tratados corretamente.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, time, tzinfo


def day_boundary(now: datetime, tz: tzinfo) -> datetime:
    """Retorna o instante (UTC) de 00:00 da data local de `now` em `tz`.

    Datetimes ingênuos (sem tzinfo) são interpretados como UTC.

    Se a meia-noite não existe na data (salto de horário de verão às 00:00),
    `fold=0` resolve para o instante da transição, que é o primeiro instante
    da data local. Se a meia-noite é ambígua, vale a primeira ocorrência.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    local_date = now.astimezone(tz).date()
    midnight = datetime.combine(local_date, time.min, tzinfo=tz)
    return midnight.astimezone(UTC)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(slots=True)
class MidnightClock:
    """Relógio injetável: fuso fixo + fonte de "agora".

    `now_fn` existe para testes determinísticos (sem sleep).
    """

    tz: tzinfo
    now_fn: Callable[[], datetime] = field(default=_utcnow)

    def now(self) -> datetime:
        return self.now_fn()

    def boundary(self, now: datetime | None = None) -> datetime:
        """Limite do dia corrente (ou do instante informado)."""
        return day_boundary(now if now is not None else self.now(), self.tz)
