"""Contrato do adapter de mensageria (cliente do protocolo WhatsApp).

O adapter é opaco para o core: gera QR, mantém a conexão e transporta
mensagens. O registro de sessões só conhece este protocolo.

Eventos entregues via `on(kind, handler)`; o handler recebe um único
argumento:
    - qr: str (desafio do QR code)
    - ready / authenticated: None
    - auth_failure / disconnected: str (motivo)
    - message / message_create: Mapping com o registro cru da mensagem
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.events.kinds import EventKind

ClientEventHandler = Callable[[Any], None]
RawRecord = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class ClientIdentity:
    """Identidade da conta autenticada no adapter."""

    wid: str
    pushname: str | None = None
    platform: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"wid": self.wid, "pushname": self.pushname, "platform": self.platform}


class MessagingClientProtocol(Protocol):
    """Capacidades mínimas de um adapter por sessão."""

    @property
    def info(self) -> ClientIdentity | None: ...

    def on(self, kind: EventKind, handler: ClientEventHandler) -> None: ...

    async def initialize(self) -> None: ...

    async def send_message(self, chat_id: str, body: str) -> RawRecord: ...

    async def get_contacts(self) -> list[RawRecord]: ...

    async def get_chats(self) -> list[RawRecord]: ...

    async def fetch_messages(self, chat_id: str, limit: int) -> list[RawRecord]: ...

    async def destroy(self) -> None: ...


# Recebe o nome da sessão e devolve um adapter novo, ainda não inicializado
MessagingClientFactory = Callable[[str], MessagingClientProtocol]
