"""EventBus tipado: tabela EventKind → handlers.

Handlers síncronos rodam inline, na ordem de inscrição. Handlers
assíncronos viram tasks rastreadas; `drain()` aguarda as pendentes.
Erros de handler são logados e nunca voltam para quem publicou: o
registro de sessões publica de dentro dos callbacks do adapter.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from app.events.kinds import EventKind, SessionEvent

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    EventHandler = Callable[[SessionEvent], Awaitable[None] | None]

logger = logging.getLogger(__name__)


class EventBus:
    """Barramento de eventos de sessão em processo."""

    def __init__(self) -> None:
        self._handlers: dict[EventKind, list[EventHandler]] = defaultdict(list)
        self._active_tasks: set[asyncio.Task[Any]] = set()

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Inscreve handler para um tipo de evento."""
        self._handlers[kind].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Inscreve handler em todos os tipos de evento."""
        for kind in EventKind:
            self.subscribe(kind, handler)

    def handler_count(self, kind: EventKind) -> int:
        return len(self._handlers.get(kind, ()))

    @property
    def pending_tasks(self) -> int:
        return len(self._active_tasks)

    def publish(self, event: SessionEvent) -> None:
        """Entrega o evento a todos os handlers do seu tipo."""
        for handler in list(self._handlers.get(event.kind, ())):
            try:
                result = handler(event)
            except Exception:
                logger.exception(
                    "event_handler_failed",
                    extra={"event": event.kind.value, "session_name": event.session_name},
                )
                continue
            if inspect.isawaitable(result):
                self._track(result, event)

    def _track(self, awaitable: Awaitable[None], event: SessionEvent) -> None:
        task = asyncio.ensure_future(awaitable)
        self._active_tasks.add(task)

        def _on_done(done: asyncio.Task[Any]) -> None:
            self._active_tasks.discard(done)
            with contextlib.suppress(asyncio.CancelledError):
                exc = done.exception()
                if exc is not None:
                    logger.error(
                        "event_handler_task_failed",
                        extra={
                            "event": event.kind.value,
                            "session_name": event.session_name,
                            "error_type": type(exc).__name__,
                        },
                    )

        task.add_done_callback(_on_done)

    async def drain(self, timeout_seconds: float | None = None) -> None:
        """Aguarda handlers assíncronos pendentes.

        Handlers que publicam novos eventos geram novas tasks; o loop
        continua até não restar nenhuma. Com timeout, as restantes são
        canceladas.
        """
        while self._active_tasks:
            pending_now = list(self._active_tasks)
            _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
            if pending:
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                logger.warning(
                    "event_bus_drain_cancelled",
                    extra={"cancelled_tasks": len(pending)},
                )
                return
