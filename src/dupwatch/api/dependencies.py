"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from dupwatch.application.runner import DedupRunner
from dupwatch.config.settings import Settings
from dupwatch.infra.event_queue import QueueEventSource


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_event_source(request: Request) -> QueueEventSource:
    """Retorna a fila de ingestão."""

    return request.app.state.event_source


def get_runner(request: Request) -> DedupRunner:
    """Retorna o runner (dono único do histórico)."""

    return request.app.state.runner
