"""Entrypoint da aplicação zap-bridge.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 3000

Uso (desenvolvimento):
    python -m app.app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router
from app.bootstrap import build_container, initialize_app, validate_runtime_settings
from app.observability import CORRELATION_HEADER, correlation_scope
from app.webhooks import WebhookError
from config.logging import get_logger
from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from fastapi import Response

    from app.bootstrap import ServiceContainer

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


async def _register_startup_webhook(container: ServiceContainer) -> None:
    """Registra WEBHOOK_URL (se definido); falha só gera alerta."""
    settings = container.webhook_settings
    if not settings.auto_register_url:
        return
    try:
        registration = await container.webhooks.set_webhook(
            settings.auto_register_url,
            settings.auto_register_events,
        )
    except WebhookError as exc:
        logger.warning(
            "startup_webhook_rejected",
            extra={"error_type": exc.code, "reason": str(exc)},
        )
        return
    logger.info(
        "startup_webhook_registered",
        extra={"test_delivery_success": registration.test_delivery.success},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Registra webhook de ambiente e cria a sessão padrão
    - Inicia o sweep periódico da fila de retry
    - Em falha, libera o container antes de propagar o erro

    Shutdown:
    - Para o sweep, desconecta sessões e fecha o cliente HTTP
    """
    logger.info("app_starting", extra={"service": "zap-bridge"})
    validate_runtime_settings()
    if app.state.container is None:
        app.state.container = build_container()
    container: ServiceContainer = app.state.container

    try:
        await _register_startup_webhook(container)
        # Falha da sessão padrão impede o boot
        await container.sessions.create_session()
        container.scheduler.start()
    except Exception as exc:
        logger.error("app_startup_failed", extra={"error_type": type(exc).__name__})
        await container.aclose()
        raise

    yield

    logger.info("app_shutting_down", extra={"service": "zap-bridge"})
    await container.aclose()


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        container: Componentes do core já montados (testes); quando None
            são criados no startup a partir das settings de ambiente.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="zap-bridge",
        description="Ponte de sessões WhatsApp com entrega de webhooks",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    fastapi_app.state.container = container

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.middleware("http")
    async def correlation_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": "zap-bridge"})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta."""
    import uvicorn

    port = get_base_settings().port
    logger.info("app_running", extra={"port": port})
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
