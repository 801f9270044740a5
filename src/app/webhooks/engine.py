"""Registro de webhooks e motor de entrega at-least-once.

Fluxo:
    1. dispatch(event, data) entrega em paralelo a cada assinatura que
       aceita o evento e aguarda todas as tentativas
    2. Tentativa que falha (timeout, conexão, não-2xx) entra na fila de
       retry da URL com attempt_count=0
    3. process_retry_queue() (sweep periódico) é o único ponto de retry:
       reentrega entradas elegíveis e descarta as que esgotaram tentativas
       ou passaram da idade máxima

Fila de cada URL protegida por asyncio.Lock próprio: dispatch e sweep
nunca alteram a mesma fila ao mesmo tempo; URLs diferentes seguem
independentes.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpError
from app.observability import record_webhook_delivery
from app.webhooks.errors import DeliveryFailure
from app.webhooks.models import (
    DeliveryResult,
    RetryEntry,
    RetrySweepSummary,
    WebhookRegistration,
    WebhookRemoval,
    WebhookSubscription,
)
from app.webhooks.validators import parse_subscribed_events, validate_webhook_url
from config.settings.webhooks import DEFAULT_SOURCE_TAG

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from app.infra.http import HttpClient

logger = logging.getLogger(__name__)

WEBHOOK_TEST_EVENT = "webhook_test"
DEFAULT_RETRY_MAX_AGE_SECONDS = 300.0

SECRET_HEADER = "X-Webhook-Secret"
EVENT_HEADER = "X-Webhook-Event"


class WebhookDeliveryEngine:
    """Dono das assinaturas por URL e das filas de retry."""

    def __init__(
        self,
        http_client: HttpClient,
        *,
        default_timeout_seconds: float = 10.0,
        default_max_retries: int = 3,
        retry_max_age_seconds: float = DEFAULT_RETRY_MAX_AGE_SECONDS,
        secret: str = "",
        source_tag: str = DEFAULT_SOURCE_TAG,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Inicializa o motor.

        Args:
            http_client: Cliente usado nas entregas
            default_timeout_seconds: Timeout padrão por assinatura
            default_max_retries: Tentativas de retry padrão por assinatura
            retry_max_age_seconds: Idade máxima de uma entrada na fila
            secret: Secret padrão enviado em X-Webhook-Secret
            source_tag: Valor do campo "source" dos payloads
            clock: Relógio monotônico (injetável em testes)
        """
        self._http = http_client
        self._default_timeout_seconds = default_timeout_seconds
        self._default_max_retries = default_max_retries
        self._retry_max_age_seconds = retry_max_age_seconds
        self._secret = secret
        self._source_tag = source_tag
        self._clock = clock
        self._subscriptions: dict[str, WebhookSubscription] = {}
        self._retry_queues: dict[str, list[RetryEntry]] = {}
        self._queue_locks: dict[str, asyncio.Lock] = {}

    # ──────────────────────────────────────────────────────────────────────
    # Registro
    # ──────────────────────────────────────────────────────────────────────

    async def set_webhook(
        self,
        url: str,
        events: Iterable[str] | None = None,
        *,
        timeout_seconds: float | None = None,
        max_retries: int | None = None,
        secret: str | None = None,
    ) -> WebhookRegistration:
        """Registra (ou substitui) a assinatura e faz uma entrega de teste.

        Raises:
            InvalidURLError: URL malformada; nada é registrado.
            InvalidEventKindError: Evento desconhecido; nada é registrado.
        """
        clean_url = validate_webhook_url(url)
        subscription = WebhookSubscription(
            url=clean_url,
            events=parse_subscribed_events(events),
            timeout_seconds=timeout_seconds or self._default_timeout_seconds,
            max_retries=self._default_max_retries if max_retries is None else max_retries,
            secret=self._secret if secret is None else secret,
        )
        replaced = clean_url in self._subscriptions
        self._subscriptions[clean_url] = subscription
        logger.info(
            "webhook_registered",
            extra={
                "events": sorted(subscription.events),
                "replaced": replaced,
                "max_retries": subscription.max_retries,
            },
        )

        test_payload = self._build_payload(
            WEBHOOK_TEST_EVENT,
            {"message": "Webhook configured successfully"},
        )
        test_delivery = await self._attempt(subscription, test_payload)
        return WebhookRegistration(
            subscription=subscription,
            test_delivery=test_delivery,
            replaced=replaced,
        )

    def remove_webhook(self, url: str) -> WebhookRemoval:
        """Remove a assinatura.

        A fila de retry da URL não é limpa aqui: o próximo sweep a descarta.
        """
        removed = self._subscriptions.pop(url.strip(), None) is not None
        logger.info("webhook_removed", extra={"removed": removed})
        return WebhookRemoval(url=url, removed=removed)

    def list_webhooks(self) -> list[WebhookSubscription]:
        return list(self._subscriptions.values())

    def get_webhook(self, url: str) -> WebhookSubscription | None:
        return self._subscriptions.get(url.strip())

    def pending_retries(self, url: str) -> int:
        return len(self._retry_queues.get(url, ()))

    def retry_queue_sizes(self) -> dict[str, int]:
        return {url: len(queue) for url, queue in self._retry_queues.items()}

    # ──────────────────────────────────────────────────────────────────────
    # Entrega
    # ──────────────────────────────────────────────────────────────────────

    async def dispatch(self, event: str, data: Mapping[str, Any]) -> list[DeliveryResult]:
        """Entrega o evento às assinaturas interessadas.

        Aguarda a rodada completa de tentativas; falhas já estão na fila
        de retry quando o método retorna.
        """
        targets = [sub for sub in self._subscriptions.values() if sub.accepts(event)]
        if not targets:
            return []

        payload = self._build_payload(event, data)
        results = await asyncio.gather(*(self._attempt(sub, payload) for sub in targets))
        return list(results)

    def _build_payload(self, event: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "event": event,
            "data": dict(data),
            "timestamp": datetime.now(UTC).isoformat(),
            "source": self._source_tag,
        }

    async def _attempt(
        self,
        subscription: WebhookSubscription,
        payload: dict[str, Any],
    ) -> DeliveryResult:
        """Primeira tentativa de entrega; falha vai para a fila de retry."""
        result = await self._deliver(subscription, payload)
        if not result.success:
            await self._enqueue(subscription.url, payload)
        return result

    async def _deliver(
        self,
        subscription: WebhookSubscription,
        payload: dict[str, Any],
        *,
        is_retry: bool = False,
    ) -> DeliveryResult:
        """Uma tentativa de POST; nunca levanta por falha de entrega."""
        event = str(payload.get("event", "unknown"))
        headers = {EVENT_HEADER: event}
        if subscription.secret:
            headers[SECRET_HEADER] = subscription.secret

        started_at = time.perf_counter()
        try:
            response = await self._http.post(
                subscription.url,
                json=payload,
                headers=headers,
                timeout_seconds=subscription.timeout_seconds,
            )
        except HttpError as exc:
            failure = DeliveryFailure(subscription.url, str(exc), exc.status_code)
            latency_ms = (time.perf_counter() - started_at) * 1000
            record_webhook_delivery(
                subscription.url,
                event,
                success=False,
                latency_ms=latency_ms,
                status_code=failure.status_code,
                is_retry=is_retry,
            )
            logger.warning(
                "webhook_delivery_failed",
                extra={"event": event, "reason": failure.reason, "status_code": failure.status_code},
            )
            return DeliveryResult(
                url=subscription.url,
                event=event,
                success=False,
                status_code=failure.status_code,
                error=failure.reason,
            )

        record_webhook_delivery(
            subscription.url,
            event,
            success=True,
            latency_ms=(time.perf_counter() - started_at) * 1000,
            status_code=response.status_code,
            is_retry=is_retry,
        )
        return DeliveryResult(
            url=subscription.url,
            event=event,
            success=True,
            status_code=response.status_code,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Fila de retry
    # ──────────────────────────────────────────────────────────────────────

    def _lock_for(self, url: str) -> asyncio.Lock:
        return self._queue_locks.setdefault(url, asyncio.Lock())

    async def _enqueue(self, url: str, payload: dict[str, Any]) -> None:
        async with self._lock_for(url):
            queue = self._retry_queues.setdefault(url, [])
            queue.append(RetryEntry(payload=payload, enqueued_at=self._clock()))
            logger.info(
                "webhook_retry_enqueued",
                extra={"event": payload.get("event"), "queue_size": len(queue)},
            )

    def _is_eligible(self, entry: RetryEntry, subscription: WebhookSubscription, now: float) -> bool:
        return (
            entry.attempt_count < subscription.max_retries
            and now - entry.enqueued_at < self._retry_max_age_seconds
        )

    async def process_retry_queue(self) -> RetrySweepSummary:
        """Executa um sweep sobre todas as filas (URLs em paralelo)."""
        urls = list(self._retry_queues)
        if not urls:
            return RetrySweepSummary()

        summaries = await asyncio.gather(*(self._sweep_url(url) for url in urls))
        total = sum(summaries, RetrySweepSummary())
        logger.info(
            "webhook_retry_sweep_completed",
            extra={
                "queues": len(urls),
                "attempted": total.attempted,
                "delivered": total.delivered,
                "failed": total.failed,
                "evicted": total.evicted,
                "dropped": total.dropped,
            },
        )
        return total

    async def _sweep_url(self, url: str) -> RetrySweepSummary:
        async with self._lock_for(url):
            queue = self._retry_queues.get(url)
            if not queue:
                self._retry_queues.pop(url, None)
                return RetrySweepSummary()

            subscription = self._subscriptions.get(url)
            if subscription is None:
                del self._retry_queues[url]
                logger.info("webhook_retry_queue_dropped", extra={"dropped": len(queue)})
                return RetrySweepSummary(dropped=len(queue))

            now = self._clock()
            selected = [entry for entry in queue if self._is_eligible(entry, subscription, now)]
            attempted = delivered = failed = 0
            for entry in selected:
                # Assinatura removida ou substituída no meio do sweep
                if self._subscriptions.get(url) is not subscription:
                    break
                attempted += 1
                result = await self._deliver(subscription, entry.payload, is_retry=True)
                if result.success:
                    queue.remove(entry)
                    delivered += 1
                else:
                    entry.attempt_count += 1
                    failed += 1

            now = self._clock()
            remaining = [entry for entry in queue if self._is_eligible(entry, subscription, now)]
            evicted = len(queue) - len(remaining)
            if remaining:
                self._retry_queues[url] = remaining
            else:
                del self._retry_queues[url]
            if evicted:
                logger.info("webhook_retry_entries_evicted", extra={"evicted": evicted})

            return RetrySweepSummary(
                attempted=attempted,
                delivered=delivered,
                failed=failed,
                evicted=evicted,
            )
