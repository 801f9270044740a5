"""Factories de componentes: composition root do core.

Monta EventBus, registro de sessões, motor de webhooks, roteador de
eventos e agendador de retry a partir das settings de ambiente.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.coordinators import EventRouter, parse_relayed_events
from app.events import EventBus
from app.infra.http import HttpClient, HttpClientConfig
from app.infra.messaging import create_memory_client
from app.sessions import SessionRegistry
from app.webhooks import RetryScheduler, WebhookDeliveryEngine
from config.settings import get_session_settings, get_webhook_settings

if TYPE_CHECKING:
    import httpx

    from app.protocols.messaging_client import MessagingClientFactory
    from config.settings import SessionSettings, WebhookSettings

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Componentes do core com tempo de vida do processo."""

    bus: EventBus
    sessions: SessionRegistry
    webhooks: WebhookDeliveryEngine
    router: EventRouter
    scheduler: RetryScheduler
    http_client: HttpClient
    session_settings: SessionSettings
    webhook_settings: WebhookSettings

    async def aclose(self) -> None:
        """Encerra na ordem: scheduler, sessões, handlers pendentes, HTTP."""
        await self.scheduler.stop()
        await self.sessions.shutdown()
        await self.bus.drain(timeout_seconds=self.webhook_settings.request_timeout_seconds)
        await self.http_client.aclose()


def load_client_factory(path: str) -> MessagingClientFactory:
    """Importa factory de adapter no formato "pacote.modulo:callable".

    Raises:
        ValueError: Caminho malformado ou atributo não chamável.
        ImportError: Módulo inexistente.
    """
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ValueError(f"MESSAGING_CLIENT_FACTORY inválido: {path!r}")
    factory = getattr(importlib.import_module(module_name), attr, None)
    if not callable(factory):
        raise ValueError(f"MESSAGING_CLIENT_FACTORY não é chamável: {path!r}")
    return factory


def create_client_factory(settings: SessionSettings | None = None) -> MessagingClientFactory:
    """Resolve a factory de adapters (memória quando não configurada)."""
    session_settings = settings or get_session_settings()
    if session_settings.uses_memory_client:
        logger.warning("messaging_client_memory_backend", extra={"component": "bootstrap"})
        return create_memory_client
    return load_client_factory(session_settings.client_factory)


def create_http_client(
    settings: WebhookSettings | None = None,
    transport_client: httpx.AsyncClient | None = None,
) -> HttpClient:
    webhook_settings = settings or get_webhook_settings()
    config = HttpClientConfig(
        timeout_seconds=webhook_settings.request_timeout_seconds,
        default_headers={
            "Content-Type": "application/json",
            "User-Agent": webhook_settings.user_agent,
        },
    )
    return HttpClient(config, client=transport_client)


def build_container(
    *,
    session_settings: SessionSettings | None = None,
    webhook_settings: WebhookSettings | None = None,
    client_factory: MessagingClientFactory | None = None,
    http_client: HttpClient | None = None,
) -> ServiceContainer:
    """Cria e conecta todos os componentes do core.

    Nada aqui faz IO: sessões e webhooks automáticos são criados no
    startup da aplicação (lifespan).
    """
    sessions_cfg = session_settings or get_session_settings()
    webhooks_cfg = webhook_settings or get_webhook_settings()

    bus = EventBus()
    http = http_client or create_http_client(webhooks_cfg)
    engine = WebhookDeliveryEngine(
        http,
        default_timeout_seconds=webhooks_cfg.request_timeout_seconds,
        default_max_retries=webhooks_cfg.max_retries,
        retry_max_age_seconds=webhooks_cfg.retry_max_age_seconds,
        secret=webhooks_cfg.secret,
        source_tag=webhooks_cfg.source_tag,
    )
    registry = SessionRegistry(
        client_factory or create_client_factory(sessions_cfg),
        bus,
        default_session_name=sessions_cfg.default_session_name,
        destroy_timeout_seconds=sessions_cfg.destroy_timeout_seconds,
        max_auth_failures=sessions_cfg.max_auth_failures,
        default_fetch_limit=sessions_cfg.default_fetch_limit,
    )
    router = EventRouter(engine, parse_relayed_events(webhooks_cfg.relayed_events))
    router.attach(bus)
    scheduler = RetryScheduler(engine, interval_seconds=webhooks_cfg.retry_interval_seconds)

    return ServiceContainer(
        bus=bus,
        sessions=registry,
        webhooks=engine,
        router=router,
        scheduler=scheduler,
        http_client=http,
        session_settings=sessions_cfg,
        webhook_settings=webhooks_cfg,
    )
