"""Respostas de erro padronizadas da API.

Corpo: {"error": <código>, "detail": <mensagem legível>}.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import status
from fastapi.responses import JSONResponse

from app.sessions import (
    AdapterInitError,
    AdapterOperationError,
    SessionError,
    SessionNotFoundError,
    SessionNotReadyError,
)
from app.webhooks import WebhookError

if TYPE_CHECKING:
    from starlette.requests import Request

    from app.bootstrap import ServiceContainer

_SESSION_ERROR_STATUS: dict[type[SessionError], int] = {
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    SessionNotReadyError: status.HTTP_409_CONFLICT,
    AdapterInitError: status.HTTP_503_SERVICE_UNAVAILABLE,
    AdapterOperationError: status.HTTP_502_BAD_GATEWAY,
}


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def error_response(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "detail": detail})


def missing_fields(*fields: str) -> JSONResponse:
    """400 para campos obrigatórios ausentes."""
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "missing_fields",
        f"{' and '.join(fields)} {'is' if len(fields) == 1 else 'are'} required",
    )


def session_error_response(exc: SessionError) -> JSONResponse:
    status_code = _SESSION_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return error_response(status_code, exc.code, str(exc))


def webhook_error_response(exc: WebhookError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, exc.code, str(exc))
