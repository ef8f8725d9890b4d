"""Contrato de persistência do histórico.

Application depende apenas deste contrato; implementações concretas
(arquivo, Redis, memória) vivem em infra.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime


class PersistenceError(Exception):
    """Falha ao gravar o histórico.

    Não é fatal: o engine loga e segue com o estado em memória.
    """

    pass


@dataclass(slots=True, frozen=True)
class LoadResult:
    """Tabela carregada + sinal de "começo do zero"."""

    table: dict[str, list[datetime]] = field(default_factory=dict)
    fresh_start: bool = False


class HistoryPersistence(ABC):
    """Contrato para salvar/carregar a tabela de histórico.

    Implementações devem:
    - Representar instantes em formato absoluto (ISO-8601 UTC)
    - Nunca falhar em load(): ausente/vazio/corrompido → LoadResult(fresh_start=True)
    - Levantar PersistenceError em falha de save()
    """

    @abstractmethod
    def save(self, table: dict[str, list[datetime]]) -> None:
        """Grava a tabela completa.

        Raises:
            PersistenceError: Em falha de I/O ou backend
        """
        ...

    @abstractmethod
    def load(self) -> LoadResult:
        """Carrega a tabela previamente gravada."""
        ...
