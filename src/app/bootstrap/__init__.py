"""Bootstrap da aplicação: inicialização e wiring.

Composition root: configura logging, valida settings e monta os
componentes do core.

Uso:
    from app.bootstrap import initialize_app, build_container

    initialize_app()
    container = build_container()
"""

from __future__ import annotations

import logging
import os

from app.bootstrap.dependencies import (
    ServiceContainer,
    build_container,
    create_client_factory,
    create_http_client,
    load_client_factory,
)
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_base_settings, get_session_settings, get_webhook_settings

SERVICE_NAME = "zap_bridge"
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "SERVICE_NAME",
    "ServiceContainer",
    "build_container",
    "create_client_factory",
    "create_http_client",
    "initialize_app",
    "load_client_factory",
    "validate_runtime_settings",
]


def initialize_app() -> None:
    """Configura logging JSON com correlation_id. Chamar uma vez no startup."""
    configure_logging(
        level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` registra alerta sem bloquear execução local.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"session: {error}" for error in get_session_settings().validate(base))
    errors.extend(f"webhook: {error}" for error in get_webhook_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")
