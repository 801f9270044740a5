"""Registro de métricas via structured logging.

As métricas são logs estruturados agregáveis depois (BigQuery,
CloudWatch Insights, Loki...). Nenhum conteúdo de mensagem, QR code
ou secret entra nos campos.

Métricas:
- Latência: tempo de execução por componente/operação
- Entrega de webhook: sucesso/falha por tentativa
- Transição de sessão: mudanças de estado de conexão

Uso:
    from app.observability import record_latency, record_webhook_delivery

    start = time.perf_counter()
    # ... operação ...
    record_latency("session_registry", "initialize", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


def _url_host(url: str) -> str:
    """Host da URL (path e query podem conter tokens)."""
    return urlsplit(url).netloc or "unknown"


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "session_registry")
        operation: Nome da operação (ex: "initialize", "send_message")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    extra: dict[str, object] = {
        "metric_type": "latency",
        "component": component,
        "operation": operation,
        "latency_ms": round(latency_ms, 2),
    }
    if correlation_id:
        extra["correlation_id"] = correlation_id
    logger.info("metric_latency", extra=extra)


def record_webhook_delivery(
    url: str,
    event: str,
    *,
    success: bool,
    latency_ms: float,
    status_code: int | None = None,
    is_retry: bool = False,
) -> None:
    """Registra uma tentativa de entrega de webhook."""
    logger.info(
        "metric_webhook_delivery",
        extra={
            "metric_type": "counter",
            "webhook_host": _url_host(url),
            "event": event,
            "success": success,
            "status_code": status_code,
            "is_retry": is_retry,
            "latency_ms": round(latency_ms, 2),
        },
    )


def record_session_transition(
    session_name: str,
    from_state: str,
    to_state: str,
    trigger: str,
) -> None:
    """Registra transição de estado de conexão."""
    logger.info(
        "metric_session_transition",
        extra={
            "metric_type": "counter",
            "session_name": session_name,
            "from_state": from_state,
            "to_state": to_state,
            "trigger": trigger,
        },
    )
