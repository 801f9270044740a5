"""Settings de webhooks de saída.

Configura o registro automático no startup, o secret compartilhado,
timeouts de entrega e a janela da fila de retry.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

WILDCARD_EVENT = "*"
DEFAULT_SOURCE_TAG = "zap-bridge"
DEFAULT_USER_AGENT = "zap-bridge/1.0.0"


def _parse_csv(raw: str) -> tuple[str, ...]:
    """Converte lista separada por vírgula em tupla sem vazios."""
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações de entrega de webhooks.

    Attributes:
        auto_register_url: URL registrada automaticamente no startup (opcional)
        auto_register_events: Eventos assinados pela URL automática
        secret: Secret enviado em X-Webhook-Secret (padrão por assinatura)
        request_timeout_seconds: Timeout de cada tentativa de entrega
        max_retries: Tentativas de retry por entrada na fila
        retry_interval_seconds: Intervalo do sweep da fila de retry
        retry_max_age_seconds: Idade máxima de uma entrada na fila
        relayed_events: Tipos de evento repassados aos assinantes
        source_tag: Valor do campo "source" nos payloads
        user_agent: User-Agent das requisições de entrega
    """

    auto_register_url: str = ""
    auto_register_events: tuple[str, ...] = ("message",)
    secret: str = ""
    request_timeout_seconds: float = 10.0
    max_retries: int = 3
    retry_interval_seconds: float = 30.0
    retry_max_age_seconds: float = 300.0
    relayed_events: tuple[str, ...] = ("message",)
    source_tag: str = DEFAULT_SOURCE_TAG
    user_agent: str = DEFAULT_USER_AGENT

    def validate(self) -> list[str]:
        """Valida configurações de webhook.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.request_timeout_seconds <= 0:
            errors.append("WEBHOOK_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("WEBHOOK_MAX_RETRIES deve ser >= 0")

        if self.retry_interval_seconds <= 0:
            errors.append("WEBHOOK_RETRY_INTERVAL_SECONDS deve ser > 0")

        if self.retry_max_age_seconds <= 0:
            errors.append("WEBHOOK_RETRY_MAX_AGE_SECONDS deve ser > 0")

        if self.auto_register_url and not self.auto_register_events:
            errors.append("WEBHOOK_EVENTS não pode ser vazio quando WEBHOOK_URL definido")

        return errors


def _load_from_env() -> WebhookSettings:
    """Carrega WebhookSettings a partir de variáveis de ambiente."""
    return WebhookSettings(
        auto_register_url=os.getenv("WEBHOOK_URL", "").strip(),
        auto_register_events=_parse_csv(os.getenv("WEBHOOK_EVENTS", "message")),
        secret=os.getenv("WEBHOOK_SECRET", ""),
        request_timeout_seconds=float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "10")),
        max_retries=int(os.getenv("WEBHOOK_MAX_RETRIES", "3")),
        retry_interval_seconds=float(os.getenv("WEBHOOK_RETRY_INTERVAL_SECONDS", "30")),
        retry_max_age_seconds=float(os.getenv("WEBHOOK_RETRY_MAX_AGE_SECONDS", "300")),
        relayed_events=_parse_csv(os.getenv("WEBHOOK_RELAYED_EVENTS", "message")),
        source_tag=os.getenv("WEBHOOK_SOURCE_TAG", DEFAULT_SOURCE_TAG),
        user_agent=os.getenv("WEBHOOK_USER_AGENT", DEFAULT_USER_AGENT),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_from_env()
