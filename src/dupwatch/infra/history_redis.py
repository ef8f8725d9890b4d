"""Persistência do histórico em Redis.

A tabela inteira vai numa única chave (string JSON), com o mesmo codec do
backend de arquivo. `SET` substitui o valor atomicamente.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from dupwatch.domain.protocols.persistence import (
    HistoryPersistence,
    LoadResult,
    PersistenceError,
)
from dupwatch.infra.history_codec import DECODE_ERRORS, decode_table, encode_table
from dupwatch.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class RedisHistoryPersistence(HistoryPersistence):
    """Histórico em Redis.

    Aceita um cliente pronto (testes) ou uma URL para conexão lazy.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        key: str = "dupwatch:history",
        client: Any | None = None,
    ) -> None:
        if client is None and not redis_url:
            raise ValueError("redis_url ou client é obrigatório")
        self._redis_url = redis_url
        self._key = key
        self._client = client

    def _get_client(self) -> Any:
        """Retorna cliente Redis (lazy loading)."""
        if self._client is None:
            try:
                # pylint: disable=import-outside-toplevel
                import redis

                self._client = redis.from_url(
                    self._redis_url,
                    decode_responses=True,
                    socket_timeout=5.0,
                    socket_connect_timeout=5.0,
                )
                logger.info(
                    "Conexão Redis configurada",
                    extra={"url": (self._redis_url or "").split("@")[-1]},  # Sem credenciais
                )
            except ImportError as e:
                logger.error("redis-py não instalado")
                raise PersistenceError(
                    "Dependência redis não encontrada. Instale com: pip install redis"
                ) from e
        return self._client

    def save(self, table: dict[str, list[datetime]]) -> None:
        payload = encode_table(table)
        try:
            self._get_client().set(self._key, payload)
        except PersistenceError:
            raise
        except Exception as e:
            logger.error(
                "Erro em operação Redis",
                extra={"operation": "save", "error_type": type(e).__name__},
            )
            raise PersistenceError(f"Falha ao gravar histórico no Redis: {e}") from e

        logger.debug("History saved (Redis)", extra={"key": self._key, "keys": len(table)})

    def load(self) -> LoadResult:
        try:
            raw = self._get_client().get(self._key)
        except Exception as e:
            logger.warning(
                "Não foi possível ler o histórico do Redis, começando do zero",
                extra={"operation": "load", "error_type": type(e).__name__},
            )
            return LoadResult(fresh_start=True)

        if not raw:
            logger.info("Histórico inexistente no Redis, começando do zero", extra={"key": self._key})
            return LoadResult(fresh_start=True)

        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            table = decode_table(raw)
        except DECODE_ERRORS as e:
            logger.warning(
                "Histórico corrompido no Redis, começando do zero",
                extra={"key": self._key, "error_type": type(e).__name__},
            )
            return LoadResult(fresh_start=True)

        logger.info("Histórico carregado (Redis)", extra={"key": self._key, "keys": len(table)})
        return LoadResult(table=table, fresh_start=False)
