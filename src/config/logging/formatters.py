"""Formatters de logging estruturado.

Todo log JSON carrega: asctime, level, logger, message,
correlation_id e service. Campos de `extra` são anexados ao objeto.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-10-19T10:30:00",
            "level": "INFO",
            "logger": "app.webhooks.engine",
            "message": "webhook_delivered",
            "correlation_id": "abc-123",
            "service": "zap_bridge",
            "status_code": 200
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
