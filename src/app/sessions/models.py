"""Modelos do registro de sessões.

Session é mutável e tem um único escritor (callbacks do seu adapter).
Os demais modelos são resultados imutáveis entregues aos chamadores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from fsm import ConnectionState, ConnectionStateMachine, create_fsm

if TYPE_CHECKING:
    from app.protocols.messaging_client import ClientIdentity, MessagingClientProtocol


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, eq=False)
class Session:
    """Sessão de mensageria: dona exclusiva do seu adapter.

    Invariante: qr_code só é não-nulo em QR_PENDING.

    Attributes:
        name: Nome único da sessão no registro
        client: Adapter da sessão
        machine: Máquina de estados de conexão
        qr_code: Desafio QR corrente (apenas em QR_PENDING)
        last_activity_at: Último evento recebido do adapter
        auth_failures: Falhas de autenticação consecutivas
        created_at: Momento de criação
    """

    name: str
    client: MessagingClientProtocol
    machine: ConnectionStateMachine
    qr_code: str | None = None
    last_activity_at: datetime = field(default_factory=_utc_now)
    auth_failures: int = 0
    created_at: datetime = field(default_factory=_utc_now)

    @classmethod
    def create(cls, name: str, client: MessagingClientProtocol) -> Session:
        return cls(name=name, client=client, machine=create_fsm(name))

    @property
    def state(self) -> ConnectionState:
        return self.machine.current_state

    @property
    def is_ready(self) -> bool:
        return self.state is ConnectionState.READY

    def touch(self) -> None:
        """Atualiza last_activity_at."""
        self.last_activity_at = _utc_now()

    def status(self) -> SessionStatus:
        return SessionStatus(
            session_name=self.name,
            state=self.state,
            has_qr_code=self.qr_code is not None,
            last_activity_at=self.last_activity_at,
            identity=self.client.info,
        )


@dataclass(frozen=True, slots=True)
class SessionStatus:
    """Retrato do estado de uma sessão."""

    session_name: str
    state: ConnectionState
    has_qr_code: bool
    last_activity_at: datetime
    identity: ClientIdentity | None = None

    @property
    def is_ready(self) -> bool:
        return self.state is ConnectionState.READY

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_name": self.session_name,
            "state": self.state.value,
            "is_ready": self.is_ready,
            "has_qr_code": self.has_qr_code,
            "last_activity_at": self.last_activity_at.isoformat(),
            "identity": self.identity.to_dict() if self.identity else None,
        }


class QRCodeStatus(StrEnum):
    """Resultados mutuamente exclusivos de get_qr_code."""

    QR_AVAILABLE = "qr_available"
    ALREADY_READY = "already_ready"
    INITIALIZING = "initializing"


@dataclass(frozen=True, slots=True)
class QRCodeResult:
    """Resultado de get_qr_code: QR corrente, sessão pronta ou em inicialização."""

    session_name: str
    status: QRCodeStatus
    qr_code: str | None = None

    @property
    def message(self) -> str:
        if self.status is QRCodeStatus.QR_AVAILABLE:
            return f'QR Code for session "{self.session_name}" is available.'
        if self.status is QRCodeStatus.ALREADY_READY:
            return (
                f'Session "{self.session_name}" is already authenticated and ready. '
                "No QR code needed."
            )
        return (
            f'Session "{self.session_name}" is initializing. '
            "Please wait for QR code to be generated."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_name": self.session_name,
            "status": self.status.value,
            "qr_code": self.qr_code,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class SendReceipt:
    """Confirmação de envio com o id atribuído pelo provedor."""

    session_name: str
    to: str
    message_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_name": self.session_name,
            "to": self.to,
            "message_id": self.message_id,
        }


@dataclass(frozen=True, slots=True)
class NormalizedMessage:
    """Registro canônico de mensagem, independente do adapter."""

    id: str
    body: str
    kind: str
    timestamp: int | None
    sender: str
    recipient: str
    is_outgoing: bool
    has_media: bool
    is_forwarded: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "body": self.body,
            "kind": self.kind,
            "timestamp": self.timestamp,
            "from": self.sender,
            "to": self.recipient,
            "is_outgoing": self.is_outgoing,
            "has_media": self.has_media,
            "is_forwarded": self.is_forwarded,
        }


@dataclass(frozen=True, slots=True)
class ContactRecord:
    """Contato da agenda da conta."""

    id: str
    name: str
    number: str | None
    is_user: bool
    is_group: bool
    is_wa_contact: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "is_user": self.is_user,
            "is_group": self.is_group,
            "is_wa_contact": self.is_wa_contact,
        }


@dataclass(frozen=True, slots=True)
class ChatRecord:
    """Conversa (individual ou grupo) da conta."""

    id: str
    name: str | None
    is_group: bool
    is_read_only: bool
    unread_count: int
    timestamp: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "is_group": self.is_group,
            "is_read_only": self.is_read_only,
            "unread_count": self.unread_count,
            "timestamp": self.timestamp,
        }
