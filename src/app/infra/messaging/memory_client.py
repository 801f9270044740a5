"""Adapter de mensageria em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não conecta a nenhuma rede. Simula o ciclo QR → authenticated
→ ready e guarda mensagens em memória; sem persistência entre reinícios.

Uso em desenvolvimento:
    client = MemoryMessagingClient("default")
    await client.initialize()      # emite "qr"
    client.authenticate()          # simula leitura do QR: "authenticated" + "ready"
    client.receive_message("5511999998888@c.us", "oi")  # emite "message"
"""

from __future__ import annotations

import time
import uuid
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from app.events import EventKind
from app.protocols.messaging_client import ClientIdentity

if TYPE_CHECKING:
    from app.protocols.messaging_client import ClientEventHandler, RawRecord

DEFAULT_WID = "5500000000000@c.us"
PLATFORM = "memory"


class MemoryMessagingClient:
    """Implementa MessagingClientProtocol sem IO."""

    def __init__(self, session_name: str, *, auto_authenticate: bool = False) -> None:
        self.session_name = session_name
        self.auto_authenticate = auto_authenticate
        self.initialized = False
        self.destroyed = False
        self.sent: list[dict[str, Any]] = []
        self._info: ClientIdentity | None = None
        self._handlers: dict[EventKind, list[ClientEventHandler]] = defaultdict(list)
        self._contacts: dict[str, dict[str, Any]] = {}
        self._messages: dict[str, list[dict[str, Any]]] = defaultdict(list)

    @property
    def info(self) -> ClientIdentity | None:
        return self._info

    @property
    def is_ready(self) -> bool:
        return self._info is not None and not self.destroyed

    def on(self, kind: EventKind, handler: ClientEventHandler) -> None:
        self._handlers[kind].append(handler)

    def emit(self, kind: EventKind, payload: Any = None) -> None:
        """Entrega evento aos handlers registrados, em ordem."""
        for handler in list(self._handlers.get(kind, ())):
            handler(payload)

    async def initialize(self) -> None:
        if self.destroyed:
            raise RuntimeError("client already destroyed")
        self.initialized = True
        if self.auto_authenticate:
            self.authenticate()
        else:
            self.emit(EventKind.QR, f"memory-qr:{self.session_name}:{uuid.uuid4().hex}")

    def authenticate(self, wid: str = DEFAULT_WID, pushname: str | None = None) -> None:
        """Simula a leitura do QR code no aparelho."""
        self.emit(EventKind.AUTHENTICATED)
        self._info = ClientIdentity(wid=wid, pushname=pushname or self.session_name, platform=PLATFORM)
        self.emit(EventKind.READY)

    def drop_connection(self, reason: str = "NAVIGATION") -> None:
        """Simula queda de conexão."""
        self._info = None
        self.emit(EventKind.DISCONNECTED, reason)

    def add_contact(self, number: str, name: str | None = None, *, is_group: bool = False) -> None:
        suffix = "@g.us" if is_group else "@c.us"
        contact_id = f"{number}{suffix}"
        self._contacts[contact_id] = {
            "id": {"_serialized": contact_id},
            "name": name,
            "pushname": name,
            "number": number,
            "isUser": not is_group,
            "isGroup": is_group,
            "isWAContact": True,
        }

    def receive_message(self, sender: str, body: str, **flags: Any) -> dict[str, Any]:
        """Simula mensagem recebida e emite "message"."""
        own_id = self._info.wid if self._info else DEFAULT_WID
        raw = self._build_message(chat_id=sender, sender=sender, recipient=own_id, body=body, from_me=False)
        raw.update(flags)
        self._messages[sender].append(raw)
        self.emit(EventKind.MESSAGE, raw)
        return raw

    def _build_message(
        self,
        *,
        chat_id: str,
        sender: str,
        recipient: str,
        body: str,
        from_me: bool,
    ) -> dict[str, Any]:
        serialized = f"{str(from_me).lower()}_{chat_id}_{uuid.uuid4().hex[:20].upper()}"
        return {
            "id": {"_serialized": serialized},
            "body": body,
            "type": "chat",
            "timestamp": int(time.time()),
            "from": sender,
            "to": recipient,
            "fromMe": from_me,
            "hasMedia": False,
            "isForwarded": False,
        }

    async def send_message(self, chat_id: str, body: str) -> RawRecord:
        if not self.is_ready:
            raise RuntimeError("client not ready")
        raw = self._build_message(
            chat_id=chat_id,
            sender=self._info.wid if self._info else DEFAULT_WID,
            recipient=chat_id,
            body=body,
            from_me=True,
        )
        self._messages[chat_id].append(raw)
        self.sent.append(raw)
        self.emit(EventKind.MESSAGE_CREATE, raw)
        return raw

    async def get_contacts(self) -> list[RawRecord]:
        return list(self._contacts.values())

    async def get_chats(self) -> list[RawRecord]:
        chats: list[RawRecord] = []
        for chat_id, messages in self._messages.items():
            contact = self._contacts.get(chat_id, {})
            chats.append({
                "id": {"_serialized": chat_id},
                "name": contact.get("name") or chat_id.split("@")[0],
                "isGroup": chat_id.endswith("@g.us"),
                "isReadOnly": False,
                "unreadCount": sum(1 for message in messages if not message["fromMe"]),
                "timestamp": messages[-1]["timestamp"] if messages else None,
            })
        return chats

    async def fetch_messages(self, chat_id: str, limit: int) -> list[RawRecord]:
        return list(self._messages.get(chat_id, ())[-limit:])

    async def destroy(self) -> None:
        self.destroyed = True
        self._info = None


def create_memory_client(session_name: str) -> MemoryMessagingClient:
    """Factory compatível com MessagingClientFactory."""
    return MemoryMessagingClient(session_name)
