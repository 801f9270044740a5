"""Adapters de mensageria."""

from app.infra.messaging.memory_client import MemoryMessagingClient, create_memory_client

__all__ = ["MemoryMessagingClient", "create_memory_client"]
