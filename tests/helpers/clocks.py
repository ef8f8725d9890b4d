"""Relógios e instantes fixos para testes determinísticos."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

JERUSALEM = ZoneInfo("Asia/Jerusalem")


class FakeClock:
    """Fonte de "agora" controlada pelos testes."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Instante UTC a partir de horário de parede em Jerusalém."""
    return datetime(year, month, day, hour, minute, tzinfo=JERUSALEM).astimezone(UTC)
