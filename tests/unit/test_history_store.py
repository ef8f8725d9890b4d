"""Testes para domain/history.py."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from dupwatch.domain.history import HistoryStore
from tests.helpers.clocks import local


class TestLookupAppend:
    """Testes para lookup/append."""

    def test_lookup_absent_key_returns_empty(self) -> None:
        """Chave ausente devolve lista vazia, sem erro."""
        assert HistoryStore().lookup("nada") == []

    def test_append_creates_key(self) -> None:
        """Primeiro append cria a chave."""
        store = HistoryStore()
        store.append("hi", local(2024, 1, 10, 8))
        assert store.lookup("hi") == [local(2024, 1, 10, 8)]
        assert "hi" in store
        assert len(store) == 1

    def test_append_keeps_identical_instants(self) -> None:
        """Mesmo minuto duas vezes = duas ocorrências."""
        store = HistoryStore()
        t = local(2024, 1, 10, 8)
        store.append("hi", t)
        store.append("hi", t)
        assert store.lookup("hi") == [t, t]

    def test_append_preserves_admission_order(self) -> None:
        """Ordem de admissão é mantida, mesmo fora de ordem cronológica."""
        store = HistoryStore()
        store.append("hi", local(2024, 1, 10, 9))
        store.append("hi", local(2024, 1, 10, 8))
        assert store.lookup("hi") == [local(2024, 1, 10, 9), local(2024, 1, 10, 8)]

    def test_lookup_returns_copy(self) -> None:
        """Mutar o retorno não altera a tabela."""
        store = HistoryStore()
        store.append("hi", local(2024, 1, 10, 8))
        store.lookup("hi").append(local(2024, 1, 10, 9))
        assert len(store.lookup("hi")) == 1

    def test_naive_instant_becomes_utc(self) -> None:
        """Instante ingênuo é armazenado como UTC."""
        store = HistoryStore()
        store.append("hi", datetime(2024, 1, 10, 6, 0))
        assert store.lookup("hi")[0].tzinfo is UTC


class TestEvict:
    """Testes para evict."""

    def _store(self) -> HistoryStore:
        store = HistoryStore()
        store.append("old", local(2024, 1, 9, 23, 59))
        store.append("mixed", local(2024, 1, 9, 10))
        store.append("mixed", local(2024, 1, 10, 7))
        store.append("new", local(2024, 1, 10, 0, 0))
        return store

    def test_evict_removes_keys_without_current_instants(self) -> None:
        """Chave só com instantes antigos é removida."""
        store = self._store()
        result = store.evict(local(2024, 1, 10))
        assert "old" not in store
        assert result.removed == 1
        assert result.retained == 2
        assert result.removed_keys == ("old",)

    def test_evict_trims_mixed_lists(self) -> None:
        """Lista mista mantém só instantes >= limite."""
        store = self._store()
        store.evict(local(2024, 1, 10))
        assert store.lookup("mixed") == [local(2024, 1, 10, 7)]

    def test_instant_equal_to_boundary_is_kept(self) -> None:
        """Remoção é estritamente anterior ao limite."""
        store = self._store()
        store.evict(local(2024, 1, 10))
        assert store.lookup("new") == [local(2024, 1, 10)]

    def test_evict_is_idempotent(self) -> None:
        """Duas evicções seguidas com o mesmo limite = mesmo estado."""
        store = self._store()
        store.evict(local(2024, 1, 10))
        first = store.snapshot()
        result = store.evict(local(2024, 1, 10))
        assert store.snapshot() == first
        assert result.removed == 0
        assert result.retained == 2

    def test_evict_empty_store(self) -> None:
        """Tabela vazia: nada a remover."""
        result = HistoryStore().evict(local(2024, 1, 10))
        assert (result.removed, result.retained) == (0, 0)

    def test_evict_logs_counts(self, caplog) -> None:
        """Log estruturado com contagens (sem textos)."""
        store = self._store()
        with caplog.at_level(logging.INFO):
            store.evict(local(2024, 1, 10))
        recs = [r for r in caplog.records if r.message == "history_evicted"]
        assert recs
        assert getattr(recs[-1], "removed", None) == 1
        assert getattr(recs[-1], "retained", None) == 2


class TestSnapshotReplace:
    """Testes para snapshot/replace."""

    def test_snapshot_is_independent(self) -> None:
        """Snapshot não compartilha listas com a tabela."""
        store = HistoryStore()
        store.append("hi", local(2024, 1, 10, 8))
        snap = store.snapshot()
        snap["hi"].append(local(2024, 1, 10, 9))
        assert len(store.lookup("hi")) == 1

    def test_replace_drops_empty_lists(self) -> None:
        """Listas vazias não viram chaves."""
        store = HistoryStore({"a": [local(2024, 1, 10, 8)], "b": []})
        assert list(store) == ["a"]
