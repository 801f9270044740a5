"""Validação de URL e de eventos assinados antes do registro."""

from __future__ import annotations

from collections.abc import Iterable

import httpx

from app.events import EventKind
from app.webhooks.errors import InvalidEventKindError, InvalidURLError
from config.settings import WILDCARD_EVENT

ALLOWED_SCHEMES = frozenset({"http", "https"})
DEFAULT_SUBSCRIBED_EVENTS: tuple[str, ...] = (EventKind.MESSAGE.value,)


def validate_webhook_url(url: str) -> str:
    """Garante URL absoluta http(s) com host.

    Returns:
        A URL sem espaços nas bordas.

    Raises:
        InvalidURLError: URL vazia, malformada, relativa ou sem host.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidURLError(url, "empty")
    try:
        parsed = httpx.URL(candidate)
    except httpx.InvalidURL as exc:
        raise InvalidURLError(url, str(exc)) from exc

    if not parsed.is_absolute_url:
        raise InvalidURLError(url, "not an absolute URL")
    if parsed.scheme not in ALLOWED_SCHEMES:
        raise InvalidURLError(url, f"unsupported scheme {parsed.scheme!r}")
    if not parsed.host:
        raise InvalidURLError(url, "missing host")
    return candidate


def parse_subscribed_events(events: Iterable[str] | None) -> frozenset[str]:
    """Normaliza eventos assinados; None ou vazio assina só "message".

    Raises:
        InvalidEventKindError: Nome fora de EventKind e diferente de "*".
    """
    names = [str(event).strip().lower() for event in (events or ()) if str(event).strip()]
    if not names:
        return frozenset(DEFAULT_SUBSCRIBED_EVENTS)

    known = {kind.value for kind in EventKind} | {WILDCARD_EVENT}
    unknown = sorted({name for name in names if name not in known})
    if unknown:
        raise InvalidEventKindError(unknown)
    return frozenset(names)
