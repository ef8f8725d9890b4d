"""Protocolos de domínio (ABCs) dependidos por Application."""

from dupwatch.domain.protocols.io import EventSource, ReplySink, ReplySinkError
from dupwatch.domain.protocols.persistence import (
    HistoryPersistence,
    LoadResult,
    PersistenceError,
)

__all__ = [
    "EventSource",
    "ReplySink",
    "ReplySinkError",
    "HistoryPersistence",
    "LoadResult",
    "PersistenceError",
]
