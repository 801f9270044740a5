"""Modelos de assinaturas de webhook, fila de retry e resultados de entrega."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from config.settings import WILDCARD_EVENT


@dataclass(frozen=True, slots=True)
class WebhookSubscription:
    """Endpoint HTTP registrado e os eventos que deseja receber.

    Attributes:
        url: URL absoluta (chave única da assinatura)
        events: Tipos de evento assinados ("*" assina todos)
        timeout_seconds: Timeout de cada tentativa de entrega
        max_retries: Tentativas de retry por entrada da fila
        secret: Valor enviado em X-Webhook-Secret
    """

    url: str
    events: frozenset[str]
    timeout_seconds: float = 10.0
    max_retries: int = 3
    secret: str = field(default="", repr=False)

    def accepts(self, event: str) -> bool:
        return event in self.events or WILDCARD_EVENT in self.events

    def to_dict(self) -> dict[str, Any]:
        """Representação pública (sem secret)."""
        return {
            "url": self.url,
            "events": sorted(self.events),
            "timeout_seconds": self.timeout_seconds,
            "max_retries": self.max_retries,
            "has_secret": bool(self.secret),
        }


@dataclass(slots=True, eq=False)
class RetryEntry:
    """Payload que falhou na entrega, aguardando o próximo sweep.

    enqueued_at usa o relógio monotônico do motor, não wall-clock.
    """

    payload: dict[str, Any]
    enqueued_at: float
    attempt_count: int = 0


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Resultado de uma tentativa de entrega."""

    url: str
    event: str
    success: bool
    status_code: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "event": self.event,
            "success": self.success,
            "status_code": self.status_code,
            "error": self.error,
        }


@dataclass(frozen=True, slots=True)
class WebhookRegistration:
    """Confirmação de set_webhook com o resultado da entrega de teste.

    A falha do teste é informativa: a assinatura fica registrada.
    """

    subscription: WebhookSubscription
    test_delivery: DeliveryResult
    replaced: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.subscription.url,
            "events": sorted(self.subscription.events),
            "replaced": self.replaced,
            "test_delivery": self.test_delivery.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class WebhookRemoval:
    """Resultado de remove_webhook."""

    url: str
    removed: bool

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "removed": self.removed}


@dataclass(frozen=True, slots=True)
class RetrySweepSummary:
    """Contadores de um sweep da fila de retry."""

    attempted: int = 0
    delivered: int = 0
    failed: int = 0
    evicted: int = 0
    dropped: int = 0

    def __add__(self, other: RetrySweepSummary) -> RetrySweepSummary:
        return RetrySweepSummary(
            attempted=self.attempted + other.attempted,
            delivered=self.delivered + other.delivered,
            failed=self.failed + other.failed,
            evicted=self.evicted + other.evicted,
            dropped=self.dropped + other.dropped,
        )
