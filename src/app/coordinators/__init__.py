"""Coordinators: fluxos que ligam sessões, eventos e webhooks."""

from app.coordinators.event_router import (
    DEFAULT_RELAYED_EVENTS,
    EventRouter,
    build_webhook_data,
    parse_relayed_events,
)

__all__ = [
    "DEFAULT_RELAYED_EVENTS",
    "EventRouter",
    "build_webhook_data",
    "parse_relayed_events",
]
