"""Agregador de rotas: registra todos os routers da API.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.sessions.router import router as sessions_router
from api.routes.webhooks.router import router as webhooks_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados."""
    api_router = APIRouter()

    # Sem prefixo: /health, /qr/{session}, /webhooks na raiz
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(sessions_router, tags=["sessions"])
    api_router.include_router(webhooks_router, tags=["webhooks"])

    return api_router
