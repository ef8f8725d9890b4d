"""Testes para infra/reply_sink.py."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from dupwatch.config.settings import Settings
from dupwatch.domain.models import DuplicateReply
from dupwatch.domain.protocols.io import ReplySinkError
from dupwatch.infra.reply_sink import HttpReplySink, LoggingReplySink, create_reply_sink
from dupwatch.observability.middleware import correlation_scope
from tests.helpers.clocks import local


def _reply() -> DuplicateReply:
    return DuplicateReply(
        original_text="hi",
        formatted_times="08:00",
        reply_text='⚠️ "hi" (08:00)',
        prior=(local(2024, 1, 10, 8),),
    )


class TestHttpReplySink:
    """Testes para HttpReplySink com transporte mockado."""

    @pytest.mark.asyncio
    async def test_posts_reply_payload(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(204)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        sink = HttpReplySink("https://hooks.example/reply", client=client)
        with correlation_scope("evt-1"):
            await sink.on_duplicate_detected(_reply())
        await client.aclose()

        assert len(captured) == 1
        assert captured[0].headers["x-correlation-id"] == "evt-1"
        assert json.loads(captured[0].content) == {
            "text": "hi",
            "times": "08:00",
            "reply": '⚠️ "hi" (08:00)',
        }

    @pytest.mark.asyncio
    async def test_error_status_raises(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        sink = HttpReplySink("https://hooks.example/reply", client=client)
        with pytest.raises(ReplySinkError, match="500"):
            await sink.on_duplicate_detected(_reply())
        await client.aclose()

    @pytest.mark.asyncio
    async def test_network_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        sink = HttpReplySink("https://hooks.example/reply", client=client)
        with pytest.raises(ReplySinkError, match="ConnectError"):
            await sink.on_duplicate_detected(_reply())
        await client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_does_not_close_injected_client(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        sink = HttpReplySink("https://hooks.example/reply", client=client)
        await sink.aclose()
        assert not client.is_closed
        await client.aclose()


class TestLoggingReplySink:
    """Testes para LoggingReplySink."""

    @pytest.mark.asyncio
    async def test_logs_without_message_text(self, caplog: pytest.LogCaptureFixture) -> None:
        """Log traz só metadados, nunca o texto do grupo."""
        with caplog.at_level(logging.INFO):
            await LoggingReplySink().on_duplicate_detected(_reply())

        record = next(r for r in caplog.records if r.getMessage() == "duplicate_detected")
        assert record.prior_count == 1
        assert record.text_length == 2
        assert not hasattr(record, "text")


class TestCreateReplySink:
    def test_logging_by_default(self) -> None:
        sink = create_reply_sink(Settings(history_backend="memory", reply_webhook_url=None))
        assert isinstance(sink, LoggingReplySink)

    def test_http_when_webhook_configured(self) -> None:
        settings = Settings(history_backend="memory", reply_webhook_url="https://hooks.example/r")
        assert isinstance(create_reply_sink(settings), HttpReplySink)
