"""Factory do backend de persistência do histórico."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dupwatch.domain.protocols.persistence import HistoryPersistence
from dupwatch.observability.logging import get_logger

if TYPE_CHECKING:
    from dupwatch.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


def create_history_persistence(settings: Settings | None = None) -> HistoryPersistence:
    """Cria o backend conforme settings.history_backend.

    - "file": FileHistoryPersistence (padrão)
    - "redis": RedisHistoryPersistence
    - "memory": InMemoryHistoryPersistence (dev/testes)

    Raises:
        ValueError: Se backend não reconhecido ou sem configuração mínima
    """
    if settings is None:
        from dupwatch.config.settings import get_settings

        settings = get_settings()

    backend = settings.history_backend.lower()

    if backend == "file":
        from dupwatch.infra.history_file import FileHistoryPersistence

        logger.info("Usando FileHistoryPersistence", extra={"path": settings.history_path})
        return FileHistoryPersistence(settings.history_path)

    if backend == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL é obrigatório quando history_backend=redis")
        from dupwatch.infra.history_redis import RedisHistoryPersistence

        logger.info("Usando RedisHistoryPersistence", extra={"key": settings.history_redis_key})
        return RedisHistoryPersistence(settings.redis_url, key=settings.history_redis_key)

    if backend == "memory":
        from dupwatch.infra.history_memory import InMemoryHistoryPersistence

        logger.info("Usando InMemoryHistoryPersistence (apenas dev/testes)")
        return InMemoryHistoryPersistence()

    raise ValueError(f"Backend de histórico não reconhecido: {backend}")
