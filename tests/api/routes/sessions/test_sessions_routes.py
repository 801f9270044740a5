"""Testes das rotas de sessão (QR, status, envio e consultas)."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from app.app import create_app
from app.bootstrap import ServiceContainer, build_container, create_http_client
from app.infra.messaging import MemoryMessagingClient
from config.settings import SessionSettings, WebhookSettings

# ──────────────────────────────────────────────────────────────────────────────
# Fixtures
# ──────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def clients() -> dict[str, MemoryMessagingClient]:
    return {}


@pytest_asyncio.fixture
async def container(clients: dict[str, MemoryMessagingClient]) -> AsyncIterator[ServiceContainer]:
    def factory(name: str) -> MemoryMessagingClient:
        clients[name] = MemoryMessagingClient(name)
        return clients[name]

    transport_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    webhook_settings = WebhookSettings()
    container = build_container(
        session_settings=SessionSettings(),
        webhook_settings=webhook_settings,
        client_factory=factory,
        http_client=create_http_client(webhook_settings, transport_client),
    )
    yield container
    await container.aclose()
    await transport_client.aclose()


@pytest_asyncio.fixture
async def api(container: ServiceContainer) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=create_app(container))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _ready_session(
    container: ServiceContainer,
    clients: dict[str, MemoryMessagingClient],
    name: str = "default",
) -> MemoryMessagingClient:
    await container.sessions.create_session(name)
    clients[name].authenticate(pushname="Loja")
    return clients[name]


# ──────────────────────────────────────────────────────────────────────────────
# Testes: QR e status
# ──────────────────────────────────────────────────────────────────────────────


class TestQRAndStatus:
    @pytest.mark.asyncio
    async def test_qr_creates_session_and_returns_code(self, api: httpx.AsyncClient) -> None:
        response = await api.get("/qr/vendas")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "qr_available"
        assert body["qr_code"].startswith("memory-qr:vendas:")

    @pytest.mark.asyncio
    async def test_qr_for_ready_session(
        self,
        api: httpx.AsyncClient,
        container: ServiceContainer,
        clients: dict[str, MemoryMessagingClient],
    ) -> None:
        await _ready_session(container, clients)

        body = (await api.get("/qr/default")).json()

        assert body["status"] == "already_ready"
        assert body["qr_code"] is None

    @pytest.mark.asyncio
    async def test_status_unknown_session_is_404(self, api: httpx.AsyncClient) -> None:
        response = await api.get("/status/ghost")

        assert response.status_code == 404
        assert response.json()["error"] == "session_not_found"

    @pytest.mark.asyncio
    async def test_status_after_qr_then_ready(
        self,
        api: httpx.AsyncClient,
        container: ServiceContainer,
        clients: dict[str, MemoryMessagingClient],
    ) -> None:
        await _ready_session(container, clients)

        body = (await api.get("/status/default")).json()

        assert body["state"] == "ready"
        assert body["has_qr_code"] is False
        assert body["identity"]["pushname"] == "Loja"


# ──────────────────────────────────────────────────────────────────────────────
# Testes: Envio
# ──────────────────────────────────────────────────────────────────────────────


class TestSend:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"to": "5511999998888"}, {"message": "oi"}])
    async def test_missing_fields_is_400(self, api: httpx.AsyncClient, payload: dict) -> None:
        response = await api.post("/send", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "missing_fields"

    @pytest.mark.asyncio
    async def test_empty_body_is_400(self, api: httpx.AsyncClient) -> None:
        assert (await api.post("/send")).status_code == 400

    @pytest.mark.asyncio
    async def test_not_ready_is_409(
        self,
        api: httpx.AsyncClient,
        container: ServiceContainer,
        clients: dict[str, MemoryMessagingClient],
    ) -> None:
        await container.sessions.create_session("default")

        response = await api.post("/send", json={"to": "5511999998888", "message": "oi"})

        assert response.status_code == 409
        assert response.json()["error"] == "session_not_ready"
        assert clients["default"].sent == []

    @pytest.mark.asyncio
    async def test_send_with_session_name(
        self,
        api: httpx.AsyncClient,
        container: ServiceContainer,
        clients: dict[str, MemoryMessagingClient],
    ) -> None:
        client = await _ready_session(container, clients, "vendas")

        response = await api.post(
            "/send",
            json={"to": "5511999998888", "message": "oi", "sessionName": "vendas"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["to"] == "5511999998888@c.us"
        assert body["message_id"] == client.sent[0]["id"]["_serialized"]

    @pytest.mark.asyncio
    async def test_adapter_failure_is_502_with_reason(
        self,
        api: httpx.AsyncClient,
        container: ServiceContainer,
        clients: dict[str, MemoryMessagingClient],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        client = await _ready_session(container, clients)

        async def rejected(chat_id: str, body: str) -> dict:
            raise RuntimeError("number not on whatsapp")

        monkeypatch.setattr(client, "send_message", rejected)

        response = await api.post("/send", json={"to": "123", "message": "hi"})

        assert response.status_code == 502
        assert response.json() == {
            "error": "adapter_operation_failed",
            "detail": 'Error sending message on session "default": number not on whatsapp',
        }


# ──────────────────────────────────────────────────────────────────────────────
# Testes: Sessões e consultas
# ──────────────────────────────────────────────────────────────────────────────


class TestSessionsAndQueries:
    @pytest.mark.asyncio
    async def test_list_and_disconnect(
        self,
        api: httpx.AsyncClient,
        container: ServiceContainer,
        clients: dict[str, MemoryMessagingClient],
    ) -> None:
        await container.sessions.create_session("a")
        await container.sessions.create_session("b")

        listed = (await api.get("/sessions")).json()["sessions"]
        removed = await api.delete("/sessions/a")
        missing = await api.delete("/sessions/a")

        assert sorted(item["session_name"] for item in listed) == ["a", "b"]
        assert removed.status_code == 200
        assert clients["a"].destroyed is True
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_contacts_chats_and_messages(
        self,
        api: httpx.AsyncClient,
        container: ServiceContainer,
        clients: dict[str, MemoryMessagingClient],
    ) -> None:
        client = await _ready_session(container, clients)
        client.add_contact("5511999998888", "Maria")
        for body in ("um", "dois", "três"):
            client.receive_message("5511999998888@c.us", body)

        contacts = (await api.get("/contacts/default")).json()
        chats = (await api.get("/chats/default")).json()
        messages = (await api.get("/messages/default/5511999998888@c.us", params={"limit": 2})).json()

        assert contacts["count"] == 1
        assert contacts["contacts"][0]["name"] == "Maria"
        assert chats["chats"][0]["unread_count"] == 3
        assert [m["body"] for m in messages["messages"]] == ["dois", "três"]

    @pytest.mark.asyncio
    async def test_queries_require_ready_session(self, api: httpx.AsyncClient) -> None:
        assert (await api.get("/contacts/ghost")).status_code == 409
        assert (await api.get("/chats/ghost")).status_code == 409
        assert (await api.get("/messages/ghost/5511@c.us")).status_code == 409

    @pytest.mark.asyncio
    async def test_adapter_query_failure_is_502(
        self,
        api: httpx.AsyncClient,
        container: ServiceContainer,
        clients: dict[str, MemoryMessagingClient],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        client = await _ready_session(container, clients)

        async def unavailable() -> list:
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(client, "get_contacts", unavailable)
        monkeypatch.setattr(client, "get_chats", unavailable)

        for path in ("/contacts/default", "/chats/default"):
            response = await api.get(path)
            assert response.status_code == 502
            assert response.json()["error"] == "adapter_operation_failed"
            assert "store unavailable" in response.json()["detail"]
