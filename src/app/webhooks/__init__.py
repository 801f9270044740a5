"""Webhooks de saída: registro de assinaturas, entrega e fila de retry."""

from app.webhooks.engine import WEBHOOK_TEST_EVENT, WebhookDeliveryEngine
from app.webhooks.errors import (
    DeliveryFailure,
    InvalidEventKindError,
    InvalidURLError,
    WebhookError,
)
from app.webhooks.models import (
    DeliveryResult,
    RetryEntry,
    RetrySweepSummary,
    WebhookRegistration,
    WebhookRemoval,
    WebhookSubscription,
)
from app.webhooks.scheduler import RetryScheduler

__all__ = [
    "WEBHOOK_TEST_EVENT",
    "DeliveryFailure",
    "DeliveryResult",
    "InvalidEventKindError",
    "InvalidURLError",
    "RetryEntry",
    "RetryScheduler",
    "RetrySweepSummary",
    "WebhookDeliveryEngine",
    "WebhookError",
    "WebhookRegistration",
    "WebhookRemoval",
    "WebhookSubscription",
]
