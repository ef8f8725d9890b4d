"""Configurações da aplicação via variáveis de ambiente.

Lidas uma única vez no startup. Validações retornam listas de erros
(vazia = OK) e são agregadas em `create_app` antes do engine consumir
eventos.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

from dupwatch.observability.logging import get_logger

# Template padrão herdado do bot original (hebraico, grupo de voluntários)
DEFAULT_REPLY_TEMPLATE: str = '⚠️ ההודעה "{text}" הופיעה ביממה האחרונה בשעות ({times})'
DEFAULT_TIMEZONE: str = "Asia/Jerusalem"


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Aplicação
    service_name: str = "dupwatch"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"  # json | text

    # Janela diária
    timezone: str = DEFAULT_TIMEZONE  # Fuso da meia-noite (nunca o fuso do processo)
    max_words: int = 3  # Mensagens com 1..max_words palavras são rastreadas
    check_interval_seconds: float = 4.0  # Cadência de polling / virada de dia
    seen_ids_max: int = 2000  # Teto do filtro de event_ids já processados

    # Persistência do histórico
    history_backend: str = "file"  # file | redis | memory
    history_path: str = "./history.json"
    redis_url: str | None = None  # Para history_backend=redis
    history_redis_key: str = "dupwatch:history"

    # Resposta
    reply_order: str = "asc"  # asc | desc
    reply_time_label: str = ""  # ex.: "ILT", "ET" (vazio = sem rótulo)
    reply_template: str = DEFAULT_REPLY_TEMPLATE
    reply_separator: str = ", "
    reply_webhook_url: str | None = None  # Sink HTTP opcional
    reply_webhook_timeout_seconds: float = 5.0

    # Ingestão
    event_queue_maxsize: int = 1000

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_staging(self) -> bool:
        """Retorna True se ambiente é staging."""
        return self.environment.lower() in ("staging", "stage")

    @property
    def tzinfo(self) -> ZoneInfo:
        """Fuso configurado. Pressupõe validate_timezone() sem erros."""
        return ZoneInfo(self.timezone)

    def validate_timezone(self) -> list[str]:
        """Valida que o fuso existe na base IANA."""
        errors: list[str] = []
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"TIMEZONE '{self.timezone}' inválido: use um nome IANA (ex.: Asia/Jerusalem)")
        return errors

    def validate_history_backend(self) -> list[str]:
        """Valida backend de persistência do histórico."""
        errors: list[str] = []
        backend = self.history_backend.lower()
        valid_backends = {"file", "redis", "memory"}

        if backend not in valid_backends:
            errors.append(
                f"HISTORY_BACKEND '{backend}' inválido. Valores válidos: {sorted(valid_backends)}"
            )

        # Memória perde o histórico do dia a cada restart
        if backend == "memory" and (self.is_staging or self.is_production):
            errors.append(
                f"HISTORY_BACKEND=memory é proibido em {self.environment}. "
                "Use 'file' ou 'redis'."
            )

        if backend == "file" and not self.history_path:
            errors.append("HISTORY_BACKEND=file requer HISTORY_PATH configurado")

        if backend == "redis" and not self.redis_url:
            errors.append("HISTORY_BACKEND=redis requer REDIS_URL configurado")

        return errors

    def validate_reply_config(self) -> list[str]:
        """Valida ordenação e template da resposta."""
        errors: list[str] = []
        if self.reply_order.lower() not in {"asc", "desc"}:
            errors.append("REPLY_ORDER inválido: use asc | desc")
        for placeholder in ("{text}", "{times}"):
            if placeholder not in self.reply_template:
                errors.append(f"REPLY_TEMPLATE deve conter o placeholder {placeholder}")
        try:
            self.reply_template.format(text="", times="")
        except (KeyError, IndexError, ValueError):
            errors.append("REPLY_TEMPLATE só aceita os placeholders {text} e {times}")
        if self.reply_webhook_url and not self.reply_webhook_url.startswith(("http://", "https://")):
            errors.append("REPLY_WEBHOOK_URL deve ser http(s)")
        return errors

    def validate_limits(self) -> list[str]:
        """Valida limites numéricos."""
        errors: list[str] = []
        if self.max_words < 1:
            errors.append("MAX_WORDS deve ser >= 1")
        if self.check_interval_seconds <= 0:
            errors.append("CHECK_INTERVAL_SECONDS deve ser > 0")
        if self.seen_ids_max < 1:
            errors.append("SEEN_IDS_MAX deve ser >= 1")
        if self.event_queue_maxsize < 1:
            errors.append("EVENT_QUEUE_MAXSIZE deve ser >= 1")
        return errors

    def validation_errors(self) -> list[str]:
        """Agrega todas as validações de startup."""
        errors: list[str] = []
        errors.extend(self.validate_timezone())
        errors.extend(self.validate_history_backend())
        errors.extend(self.validate_reply_config())
        errors.extend(self.validate_limits())
        return errors

    def model_post_init(self, __context: Any) -> None:
        """Registra o ambiente carregado (sem valores sensíveis)."""
        logger: logging.Logger = get_logger(__name__)
        logger.info(
            "Configuração carregada",
            extra={
                "environment": self.environment,
                "timezone": self.timezone,
                "history_backend": self.history_backend,
            },
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings."""
    return Settings()
