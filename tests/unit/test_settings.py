"""Testes unitários para config/settings.py.

Valida valores padrão e métodos de validação de startup.
"""

from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from dupwatch.config.settings import DEFAULT_REPLY_TEMPLATE, Settings, get_settings


class TestSettingsDefaults:
    """Testes para valores padrão de Settings."""

    def test_environment_flags(self) -> None:
        """Flags de ambiente reconhecem aliases."""
        assert Settings(environment="prod").is_production is True
        assert Settings(environment="stage").is_staging is True
        assert Settings(environment="development").is_production is False

    def test_default_window_parameters(self) -> None:
        """Fuso de Jerusalém, até 3 palavras, checagem a cada 4s."""
        s = Settings(timezone="Asia/Jerusalem", max_words=3, check_interval_seconds=4.0)
        assert s.tzinfo == ZoneInfo("Asia/Jerusalem")
        assert s.max_words == 3
        assert s.seen_ids_max == 2000

    def test_default_template_has_placeholders(self) -> None:
        assert "{text}" in DEFAULT_REPLY_TEMPLATE
        assert "{times}" in DEFAULT_REPLY_TEMPLATE

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Variáveis de ambiente sobrescrevem os padrões."""
        monkeypatch.setenv("TIMEZONE", "America/New_York")
        monkeypatch.setenv("MAX_WORDS", "5")
        s = Settings()
        assert s.timezone == "America/New_York"
        assert s.max_words == 5

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestValidation:
    """Testes para validate_* e validation_errors."""

    def test_valid_config_has_no_errors(self) -> None:
        s = Settings(history_backend="file", history_path="/tmp/h.json")
        assert s.validation_errors() == []

    def test_unknown_timezone(self) -> None:
        errors = Settings(timezone="Mars/Olympus").validate_timezone()
        assert len(errors) == 1
        assert "TIMEZONE" in errors[0]

    def test_unknown_backend(self) -> None:
        errors = Settings(history_backend="sqlite").validate_history_backend()
        assert any("inválido" in e for e in errors)

    @pytest.mark.parametrize("environment", ["production", "staging"])
    def test_memory_backend_forbidden_outside_dev(self, environment: str) -> None:
        """Memória perde o dia no restart: proibido em staging/prod."""
        s = Settings(environment=environment, history_backend="memory")
        assert any("proibido" in e for e in s.validate_history_backend())

    def test_redis_requires_url(self) -> None:
        s = Settings(history_backend="redis", redis_url=None)
        assert any("REDIS_URL" in e for e in s.validate_history_backend())

    def test_file_requires_path(self) -> None:
        s = Settings(history_backend="file", history_path="")
        assert any("HISTORY_PATH" in e for e in s.validate_history_backend())

    @pytest.mark.parametrize(
        ("template", "fragment"),
        [
            ("repetido: {text}", "{times}"),
            ("{times}", "{text}"),
            ("{text} {times} {extra}", "só aceita"),
        ],
    )
    def test_invalid_template(self, template: str, fragment: str) -> None:
        errors = Settings(reply_template=template).validate_reply_config()
        assert any(fragment in e for e in errors)

    def test_invalid_order(self) -> None:
        errors = Settings(reply_order="random").validate_reply_config()
        assert any("REPLY_ORDER" in e for e in errors)

    def test_webhook_must_be_http(self) -> None:
        errors = Settings(reply_webhook_url="ftp://x").validate_reply_config()
        assert any("REPLY_WEBHOOK_URL" in e for e in errors)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("max_words", 0),
            ("check_interval_seconds", 0),
            ("seen_ids_max", 0),
            ("event_queue_maxsize", 0),
        ],
    )
    def test_invalid_limits(self, field: str, value: float) -> None:
        assert Settings(**{field: value}).validate_limits()

    def test_validation_errors_aggregates(self) -> None:
        s = Settings(timezone="Mars/Olympus", max_words=0)
        assert len(s.validation_errors()) == 2
