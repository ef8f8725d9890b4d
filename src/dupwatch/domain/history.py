"""Tabela de histórico: chave normalizada → instantes de ocorrência.

Única estrutura mutável durável do sistema. A persistência só recebe
snapshots (cópias) via `snapshot()`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from datetime import UTC, datetime

from dupwatch.domain.models import EvictionResult
from dupwatch.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

HistoryTable = dict[str, list[datetime]]


def _as_aware(instant: datetime) -> datetime:
    return instant if instant.tzinfo is not None else instant.replace(tzinfo=UTC)


class HistoryStore:
    """Histórico do dia em memória.

    A ordem de cada lista é a ordem de admissão, não necessariamente a
    cronológica; quem formata ordena.
    """

    def __init__(self, table: Mapping[str, list[datetime]] | None = None) -> None:
        self._table: HistoryTable = {}
        if table:
            self.replace(table)

    def lookup(self, key: str) -> list[datetime]:
        """Retorna cópia das ocorrências (vazia se ausente)."""
        return list(self._table.get(key, ()))

    def append(self, key: str, instant: datetime) -> None:
        """Anexa o instante; instantes iguais não são deduplicados."""
        self._table.setdefault(key, []).append(_as_aware(instant))

    def evict(self, boundary: datetime) -> EvictionResult:
        """Remove instantes estritamente anteriores ao limite.

        Varre a tabela inteira; chaves que ficam vazias são removidas.
        Idempotente para o mesmo limite.
        """
        boundary = _as_aware(boundary)
        removed: list[str] = []
        for key in list(self._table):
            kept = [t for t in self._table[key] if t >= boundary]
            if kept:
                self._table[key] = kept
            else:
                del self._table[key]
                removed.append(key)

        result = EvictionResult(
            removed=len(removed),
            retained=len(self._table),
            removed_keys=tuple(removed),
        )
        logger.info(
            "history_evicted",
            extra={
                "boundary": boundary.isoformat(),
                "removed": result.removed,
                "retained": result.retained,
            },
        )
        return result

    def snapshot(self) -> HistoryTable:
        """Cópia profunda o suficiente para serialização."""
        return {key: list(times) for key, times in self._table.items()}

    def replace(self, table: Mapping[str, list[datetime]]) -> None:
        """Substitui todo o conteúdo (usado no carregamento)."""
        self._table = {
            key: [_as_aware(t) for t in times] for key, times in table.items() if times
        }

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)
