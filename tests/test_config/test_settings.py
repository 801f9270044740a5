"""Testes das settings carregadas do ambiente."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from config.settings import (
    BaseSettings,
    SessionSettings,
    WebhookSettings,
    get_base_settings,
    get_session_settings,
    get_webhook_settings,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_base_settings.cache_clear()
    get_session_settings.cache_clear()
    get_webhook_settings.cache_clear()
    yield
    get_base_settings.cache_clear()
    get_session_settings.cache_clear()
    get_webhook_settings.cache_clear()


class TestBaseSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("PORT", raising=False)

        settings = get_base_settings()

        assert settings.environment == "development"
        assert settings.port == 3000
        assert settings.validate() == []

    def test_environment_aliases_and_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "prod")
        monkeypatch.setenv("PORT", "8081")

        settings = get_base_settings()

        assert settings.is_production
        assert settings.port == 8081

    def test_invalid_port(self) -> None:
        assert any("PORT" in error for error in BaseSettings(port=70000).validate())


class TestSessionSettings:
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_NAME", "vendas")
        monkeypatch.setenv("SESSION_MAX_AUTH_FAILURES", "3")
        monkeypatch.setenv("MESSAGING_CLIENT_FACTORY", "adapters.wweb:create_client")

        settings = get_session_settings()

        assert settings.default_session_name == "vendas"
        assert settings.max_auth_failures == 3
        assert settings.uses_memory_client is False

    def test_memory_client_only_allowed_in_development(self) -> None:
        settings = SessionSettings()

        assert settings.validate(BaseSettings(environment="development")) == []
        errors = settings.validate(BaseSettings(environment="production"))
        assert any("memória" in error for error in errors)

    def test_malformed_factory_path(self) -> None:
        errors = SessionSettings(client_factory="adapters.wweb").validate(BaseSettings())
        assert any("MESSAGING_CLIENT_FACTORY" in error for error in errors)


class TestWebhookSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("WEBHOOK_URL", "WEBHOOK_EVENTS", "WEBHOOK_RELAYED_EVENTS"):
            monkeypatch.delenv(name, raising=False)

        settings = get_webhook_settings()

        assert settings.auto_register_url == ""
        assert settings.auto_register_events == ("message",)
        assert settings.relayed_events == ("message",)
        assert settings.max_retries == 3
        assert settings.retry_interval_seconds == 30.0
        assert settings.retry_max_age_seconds == 300.0

    def test_csv_events_are_trimmed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WEBHOOK_URL", " https://hooks.example.com/in ")
        monkeypatch.setenv("WEBHOOK_EVENTS", "message, qr,,ready ")

        settings = get_webhook_settings()

        assert settings.auto_register_url == "https://hooks.example.com/in"
        assert settings.auto_register_events == ("message", "qr", "ready")

    def test_validate_rejects_non_positive_values(self) -> None:
        errors = WebhookSettings(request_timeout_seconds=0, max_retries=-1).validate()
        assert len(errors) == 2
