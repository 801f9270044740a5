"""Roteador de eventos: sessões → webhooks.

Inscreve-se em todos os EventKind do bus e repassa ao motor de entrega
apenas os tipos configurados em relayed_events (padrão: só "message").
Os demais continuam alimentando o estado das sessões, sem relay.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.events import EventKind, SessionEvent, parse_event_kind
from app.observability import correlation_scope

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.events import EventBus
    from app.webhooks import WebhookDeliveryEngine

logger = logging.getLogger(__name__)

DEFAULT_RELAYED_EVENTS: frozenset[EventKind] = frozenset({EventKind.MESSAGE})


def parse_relayed_events(names: Iterable[str]) -> frozenset[EventKind]:
    """Converte nomes configurados em EventKind ("*" = todos).

    Raises:
        ValueError: Nome de evento desconhecido.
    """
    kinds: set[EventKind] = set()
    for name in names:
        if name.strip() == "*":
            return frozenset(EventKind)
        kinds.add(parse_event_kind(name))
    return frozenset(kinds)


def build_webhook_data(event: SessionEvent) -> dict[str, Any]:
    """Campos de `data` do payload: nome da sessão + campos do evento."""
    return {
        "session_name": event.session_name,
        **event.data,
        "occurred_at": event.occurred_at.isoformat(),
    }


class EventRouter:
    """Liga o EventBus ao WebhookDeliveryEngine."""

    def __init__(
        self,
        engine: WebhookDeliveryEngine,
        relayed_events: Iterable[EventKind] = DEFAULT_RELAYED_EVENTS,
    ) -> None:
        self._engine = engine
        self._relayed_events = frozenset(relayed_events)

    @property
    def relayed_events(self) -> frozenset[EventKind]:
        return self._relayed_events

    def attach(self, bus: EventBus) -> None:
        bus.subscribe_all(self.handle)

    def should_relay(self, kind: EventKind) -> bool:
        return kind in self._relayed_events

    async def handle(self, event: SessionEvent) -> None:
        """Handler do bus; falhas de entrega ficam no motor (fila de retry)."""
        if not self.should_relay(event.kind):
            logger.debug(
                "event_not_relayed",
                extra={"event": event.kind.value, "session_name": event.session_name},
            )
            return

        with correlation_scope():
            results = await self._engine.dispatch(event.kind.value, build_webhook_data(event))
            logger.info(
                "event_relayed",
                extra={
                    "event": event.kind.value,
                    "session_name": event.session_name,
                    "deliveries": len(results),
                    "failed": sum(1 for result in results if not result.success),
                },
            )
