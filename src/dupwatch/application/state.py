"""Contexto mutável do detector (substitui globais de módulo)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from dupwatch.domain.history import HistoryStore
from dupwatch.domain.seen_events import SeenEventFilter


@dataclass(slots=True)
class DedupState:
    """Histórico, filtro de ids e limite da última evicção.

    Construído uma vez no startup e mantido pelo engine, que é o único
    escritor.
    """

    history: HistoryStore = field(default_factory=HistoryStore)
    seen: SeenEventFilter = field(default_factory=SeenEventFilter)
    last_eviction: datetime | None = None
