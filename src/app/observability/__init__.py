"""Observabilidade: correlation_id e métricas via logs estruturados.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_webhook_delivery
"""

from app.observability.correlation import (
    CORRELATION_HEADER,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_latency,
    record_session_transition,
    record_webhook_delivery,
)

__all__ = [
    "CORRELATION_HEADER",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "record_latency",
    "record_session_transition",
    "record_webhook_delivery",
    "reset_correlation_id",
    "set_correlation_id",
]
