"""Eventos de sessão: tipos, envelope e barramento em processo."""

from app.events.bus import EventBus
from app.events.kinds import EventKind, SessionEvent, parse_event_kind

__all__ = [
    "EventBus",
    "EventKind",
    "SessionEvent",
    "parse_event_kind",
]
