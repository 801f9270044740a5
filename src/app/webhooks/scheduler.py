"""Job periódico do sweep da fila de retry.

Task cancelável do asyncio; testes chamam run_once() sem depender
do relógio.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.webhooks.engine import WebhookDeliveryEngine
    from app.webhooks.models import RetrySweepSummary

logger = logging.getLogger(__name__)

DEFAULT_RETRY_INTERVAL_SECONDS = 30.0


class RetryScheduler:
    """Executa engine.process_retry_queue() a cada intervalo fixo."""

    def __init__(
        self,
        engine: WebhookDeliveryEngine,
        interval_seconds: float = DEFAULT_RETRY_INTERVAL_SECONDS,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds deve ser > 0")
        self._engine = engine
        self._interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    def start(self) -> None:
        """Agenda o loop no event loop corrente (idempotente)."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="webhook-retry-scheduler")
        logger.info(
            "webhook_retry_scheduler_started",
            extra={"interval_seconds": self._interval_seconds},
        )

    async def stop(self) -> None:
        """Cancela o loop e aguarda o término."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("webhook_retry_scheduler_stopped")

    async def run_once(self) -> RetrySweepSummary:
        """Executa um único sweep."""
        return await self._engine.process_retry_queue()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_seconds)
            try:
                await self.run_once()
            except Exception:
                # Um sweep com erro não pode matar o agendamento
                logger.exception("webhook_retry_sweep_failed")
