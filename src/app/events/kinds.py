"""Tipos de evento emitidos pelas sessões e o envelope publicado no bus."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class EventKind(StrEnum):
    """Eventos do adapter de mensageria, repassados pelo registro de sessões."""

    QR = "qr"
    READY = "ready"
    AUTHENTICATED = "authenticated"
    AUTH_FAILURE = "auth_failure"
    DISCONNECTED = "disconnected"
    MESSAGE = "message"
    MESSAGE_CREATE = "message_create"

    def __str__(self) -> str:
        return self.value


def parse_event_kind(value: str) -> EventKind:
    """Converte nome de evento em EventKind.

    Raises:
        ValueError: Se o nome não corresponde a nenhum evento.
    """
    return EventKind(value.strip().lower())


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """Evento de uma sessão publicado no EventBus.

    Attributes:
        kind: Tipo do evento
        session_name: Sessão de origem
        data: Campos específicos do evento (ex: qr, reason, message)
        occurred_at: Momento em que o registro processou o evento (UTC)
    """

    kind: EventKind
    session_name: str
    data: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
