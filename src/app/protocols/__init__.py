"""Protocolos e contratos do core da aplicação."""

from .messaging_client import (
    ClientEventHandler,
    ClientIdentity,
    MessagingClientFactory,
    MessagingClientProtocol,
    RawRecord,
)

__all__ = [
    "ClientEventHandler",
    "ClientIdentity",
    "MessagingClientFactory",
    "MessagingClientProtocol",
    "RawRecord",
]
