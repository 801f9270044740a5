"""Endpoint de health check (liveness)."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.routes.responses import get_container

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    time: str
    sessions: int = 0
    webhooks: int = 0
    pending_retries: int = 0


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe: processo no ar e contadores do core."""
    container = get_container(request)
    return HealthResponse(
        status="ok",
        time=datetime.now(UTC).isoformat(),
        sessions=len(container.sessions),
        webhooks=len(container.webhooks.list_webhooks()),
        pending_retries=sum(container.webhooks.retry_queue_sizes().values()),
    )
