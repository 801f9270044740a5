"""Erros do registro e da entrega de webhooks."""

from __future__ import annotations


class WebhookError(Exception):
    """Erro base de webhooks."""

    code = "webhook_error"


class InvalidURLError(WebhookError):
    """URL de webhook malformada; rejeitada antes do registro."""

    code = "invalid_url"

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid webhook URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class InvalidEventKindError(WebhookError):
    """Assinatura referencia tipo de evento desconhecido."""

    code = "invalid_event_kind"

    def __init__(self, events: list[str]) -> None:
        super().__init__(f"Unknown webhook event kind(s): {', '.join(events)}")
        self.events = events


class DeliveryFailure(WebhookError):
    """Falha transitória de uma tentativa de entrega.

    Alimenta a fila de retry; nunca chega a quem publicou o evento.
    """

    code = "delivery_failure"

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"Delivery to {url} failed: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code
