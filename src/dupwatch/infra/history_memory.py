"""Persistência em memória (apenas dev/testes).

⚠️ Não usar em produção: o histórico do dia se perde no restart.
"""

from __future__ import annotations

from datetime import datetime

from dupwatch.domain.protocols.persistence import HistoryPersistence, LoadResult
from dupwatch.infra.history_codec import decode_table, encode_table


class InMemoryHistoryPersistence(HistoryPersistence):
    """Guarda o último snapshot serializado.

    Serializa de verdade (em vez de guardar referências) para que os testes
    exercitem o mesmo codec dos backends duráveis.
    """

    def __init__(self) -> None:
        self._payload: str | None = None
        self.save_count = 0

    def save(self, table: dict[str, list[datetime]]) -> None:
        self._payload = encode_table(table)
        self.save_count += 1

    def load(self) -> LoadResult:
        if not self._payload:
            return LoadResult(fresh_start=True)
        return LoadResult(table=decode_table(self._payload), fresh_start=False)
