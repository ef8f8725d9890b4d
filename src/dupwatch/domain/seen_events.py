"""Filtro limitado de event_ids já processados no dia."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field


@dataclass(slots=True)
class SeenEventFilter:
    """Conjunto limitado com descarte dos ids mais antigos.

    Zerado a cada virada de dia; o teto só limita memória quando a virada
    atrasa (ex.: clock skew). Quais ids sobrevivem não afeta a correção.
    """

    max_size: int = 2000
    _ids: OrderedDict[str, None] = field(default_factory=OrderedDict)

    def add(self, event_id: str) -> bool:
        """Marca o id; retorna False se já estava presente."""
        if event_id in self._ids:
            return False
        self._ids[event_id] = None
        while len(self._ids) > self.max_size:
            self._ids.popitem(last=False)
        return True

    def clear(self) -> None:
        self._ids.clear()

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
