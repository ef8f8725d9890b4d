"""Persistência do histórico em arquivo JSON local.

Escrita atômica: grava num temporário no mesmo diretório e faz
`os.replace`, de modo que um kill no meio do save nunca deixa o
arquivo truncado.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from dupwatch.domain.protocols.persistence import (
    HistoryPersistence,
    LoadResult,
    PersistenceError,
)
from dupwatch.infra.history_codec import DECODE_ERRORS, decode_table, encode_table
from dupwatch.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class FileHistoryPersistence(HistoryPersistence):
    """Histórico em `history.json` (backend padrão)."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, table: dict[str, list[datetime]]) -> None:
        payload = encode_table(table)
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            logger.error(
                "Falha ao gravar histórico em arquivo",
                extra={"path": str(self._path), "error_type": type(e).__name__},
            )
            raise PersistenceError(f"Falha ao gravar {self._path}: {e}") from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug(
            "History saved (file)",
            extra={"path": str(self._path), "keys": len(table)},
        )

    def load(self) -> LoadResult:
        if not self._path.exists():
            logger.info("Histórico inexistente, começando do zero", extra={"path": str(self._path)})
            return LoadResult(fresh_start=True)

        try:
            raw = self._path.read_text(encoding="utf-8")
            if not raw.strip():
                logger.info("Histórico vazio, começando do zero", extra={"path": str(self._path)})
                return LoadResult(fresh_start=True)
            table = decode_table(raw)
        except (OSError, *DECODE_ERRORS) as e:
            # UnicodeDecodeError e JSONDecodeError são ValueError
            logger.warning(
                "Histórico ilegível ou corrompido, começando do zero",
                extra={"path": str(self._path), "error_type": type(e).__name__},
            )
            return LoadResult(fresh_start=True)

        logger.info("Histórico carregado", extra={"path": str(self._path), "keys": len(table)})
        return LoadResult(table=table, fresh_start=False)
