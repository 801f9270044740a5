"""Módulo de sessões de mensageria.

Exporta o registro de sessões, modelos e erros.
"""

from app.sessions.errors import (
    AdapterInitError,
    AdapterOperationError,
    SessionError,
    SessionNotFoundError,
    SessionNotReadyError,
)
from app.sessions.models import (
    ChatRecord,
    ContactRecord,
    NormalizedMessage,
    QRCodeResult,
    QRCodeStatus,
    SendReceipt,
    Session,
    SessionStatus,
)
from app.sessions.registry import SessionRegistry

__all__ = [
    "AdapterInitError",
    "AdapterOperationError",
    "ChatRecord",
    "ContactRecord",
    "NormalizedMessage",
    "QRCodeResult",
    "QRCodeStatus",
    "SendReceipt",
    "Session",
    "SessionError",
    "SessionNotFoundError",
    "SessionNotReadyError",
    "SessionRegistry",
    "SessionStatus",
]
