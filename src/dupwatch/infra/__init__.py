"""Camada de infraestrutura: adapters para armazenamento e I/O externos.

- Persistência: FileHistoryPersistence, RedisHistoryPersistence,
  InMemoryHistoryPersistence, create_history_persistence
- Respostas: LoggingReplySink, HttpReplySink, create_reply_sink
- Ingestão: QueueEventSource

Infraestrutura não decide regra de negócio.
"""

from dupwatch.infra.event_queue import EventQueueFullError, QueueEventSource
from dupwatch.infra.history_factory import create_history_persistence
from dupwatch.infra.history_file import FileHistoryPersistence
from dupwatch.infra.history_memory import InMemoryHistoryPersistence
from dupwatch.infra.history_redis import RedisHistoryPersistence
from dupwatch.infra.reply_sink import HttpReplySink, LoggingReplySink, create_reply_sink

__all__ = [
    # Persistência
    "FileHistoryPersistence",
    "RedisHistoryPersistence",
    "InMemoryHistoryPersistence",
    "create_history_persistence",
    # Respostas
    "LoggingReplySink",
    "HttpReplySink",
    "create_reply_sink",
    # Ingestão
    "QueueEventSource",
    "EventQueueFullError",
]
