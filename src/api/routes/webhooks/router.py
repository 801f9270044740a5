"""Endpoints de webhooks.

- GET    /webhooks: assinaturas registradas
- POST   /webhooks: registra/substitui assinatura (com entrega de teste)
- DELETE /webhooks?url=...: remove assinatura (url também aceita no corpo)
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from api.routes.responses import get_container, missing_fields, webhook_error_response
from app.webhooks import WebhookError

router = APIRouter()


class WebhookRequest(BaseModel):
    """Corpo de POST /webhooks."""

    url: str | None = None
    events: list[str] | None = None
    timeout_seconds: float | None = Field(default=None, gt=0)
    max_retries: int | None = Field(default=None, ge=0)
    secret: str | None = None


class WebhookRemovalRequest(BaseModel):
    url: str | None = None


@router.get("/webhooks")
async def list_webhooks(request: Request) -> dict[str, Any]:
    engine = get_container(request).webhooks
    queue_sizes = engine.retry_queue_sizes()
    return {
        "webhooks": [
            {**subscription.to_dict(), "pending_retries": queue_sizes.get(subscription.url, 0)}
            for subscription in engine.list_webhooks()
        ]
    }


@router.post("/webhooks")
async def set_webhook(request: Request, payload: WebhookRequest | None = None) -> Any:
    if payload is None or not payload.url:
        return missing_fields("url")
    try:
        registration = await get_container(request).webhooks.set_webhook(
            payload.url,
            payload.events,
            timeout_seconds=payload.timeout_seconds,
            max_retries=payload.max_retries,
            secret=payload.secret,
        )
    except WebhookError as exc:
        return webhook_error_response(exc)
    return registration.to_dict()


@router.delete("/webhooks")
async def remove_webhook(
    request: Request,
    url: str | None = None,
    payload: WebhookRemovalRequest | None = None,
) -> Any:
    target = url or (payload.url if payload else None)
    if not target:
        return missing_fields("url")
    return get_container(request).webhooks.remove_webhook(target).to_dict()
