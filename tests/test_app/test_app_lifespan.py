"""Testes do ciclo de vida da aplicação (startup/shutdown)."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.bootstrap import build_container, create_http_client
from app.infra.messaging import MemoryMessagingClient
from app.sessions import AdapterInitError
from config.settings import SessionSettings, WebhookSettings


def test_startup_registers_env_webhook_and_default_session() -> None:
    delivered: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        delivered.append(request)
        return httpx.Response(200)

    clients: list[MemoryMessagingClient] = []

    def factory(name: str) -> MemoryMessagingClient:
        clients.append(MemoryMessagingClient(name))
        return clients[-1]

    webhook_settings = WebhookSettings(auto_register_url="http://x/hook", auto_register_events=("message",))
    transport_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    container = build_container(
        session_settings=SessionSettings(default_session_name="default"),
        webhook_settings=webhook_settings,
        client_factory=factory,
        http_client=create_http_client(webhook_settings, transport_client),
    )

    with TestClient(create_app(container)) as client:
        status = client.get("/status/default").json()
        webhooks = client.get("/webhooks").json()["webhooks"]
        assert container.scheduler.is_running is True

    assert status["state"] == "qr_pending"
    assert status["has_qr_code"] is True
    assert [item["url"] for item in webhooks] == ["http://x/hook"]
    assert json.loads(delivered[0].content)["event"] == "webhook_test"
    assert container.scheduler.is_running is False
    assert clients[0].destroyed is True


def test_startup_with_rejected_env_webhook_still_boots() -> None:
    webhook_settings = WebhookSettings(auto_register_url="ftp://x/hook")
    container = build_container(
        session_settings=SessionSettings(),
        webhook_settings=webhook_settings,
        client_factory=MemoryMessagingClient,
        http_client=create_http_client(
            webhook_settings,
            httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200))),
        ),
    )

    with TestClient(create_app(container)) as client:
        assert client.get("/health").json()["webhooks"] == 0


def test_default_session_failure_aborts_startup_and_releases_container() -> None:
    created: list[MemoryMessagingClient] = []

    class BrokenClient(MemoryMessagingClient):
        async def initialize(self) -> None:
            created.append(self)
            raise ConnectionError("browser launch failed")

    webhook_settings = WebhookSettings()
    container = build_container(
        session_settings=SessionSettings(),
        webhook_settings=webhook_settings,
        client_factory=BrokenClient,
        http_client=create_http_client(webhook_settings),
    )

    with pytest.raises(AdapterInitError), TestClient(create_app(container)):
        pass

    assert container.http_client._client.is_closed is True
    assert container.scheduler.is_running is False
    assert container.sessions.get_all_sessions() == {}
    assert created[0].destroyed is True
