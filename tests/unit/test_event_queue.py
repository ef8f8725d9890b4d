"""Testes para infra/event_queue.py."""

from __future__ import annotations

import pytest

from dupwatch.domain.models import ChatEvent
from dupwatch.infra.event_queue import EventQueueFullError, QueueEventSource
from tests.helpers.clocks import local


def _event(event_id: str) -> ChatEvent:
    return ChatEvent(event_id=event_id, text="hi", observed_at=local(2024, 1, 10, 8))


class TestQueueEventSource:
    """Testes para QueueEventSource."""

    @pytest.mark.asyncio
    async def test_fifo_order(self) -> None:
        source = QueueEventSource(maxsize=5)
        source.submit(_event("a"))
        source.submit(_event("b"))
        assert source.qsize() == 2
        assert (await source.next_event(timeout=0.1)).event_id == "a"
        assert (await source.next_event(timeout=0.1)).event_id == "b"

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self) -> None:
        assert await QueueEventSource().next_event(timeout=0.01) is None

    @pytest.mark.asyncio
    async def test_full_queue_raises(self) -> None:
        source = QueueEventSource(maxsize=1)
        source.submit(_event("a"))
        with pytest.raises(EventQueueFullError):
            source.submit(_event("b"))
        assert source.qsize() == 1
