"""Serialização JSON da tabela de histórico.

Formato: {"texto normalizado": ["2024-01-10T06:00:00Z", ...], ...}
Instantes sempre em UTC absoluto; o reload independe do fuso do processo.
Compatível com o history.json gravado pelo bot anterior (toISOString).
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

# Falhas de decodificação de um payload corrompido (bytes inválidos,
# JSON malformado ou aninhado demais)
DECODE_ERRORS: tuple[type[Exception], ...] = (ValueError, RecursionError)


def encode_instant(instant: datetime) -> str:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC).isoformat().replace("+00:00", "Z")


def decode_instant(raw: str) -> datetime:
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def encode_table(table: dict[str, list[datetime]]) -> str:
    """Serializa preservando a ordem de admissão de cada lista."""
    payload = {key: [encode_instant(t) for t in times] for key, times in table.items()}
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def decode_table(raw: str | bytes) -> dict[str, list[datetime]]:
    """Desserializa; levanta ValueError se o formato não confere."""
    data: Any = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("history payload must be a JSON object")

    table: dict[str, list[datetime]] = {}
    for key, times in data.items():
        if not isinstance(times, list) or not all(isinstance(t, str) for t in times):
            raise ValueError(f"invalid occurrence list for key of length {len(key)}")
        if times:
            table[key] = [decode_instant(t) for t in times]
    return table
