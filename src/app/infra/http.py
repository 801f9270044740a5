"""Cliente HTTP assíncrono para chamadas de saída (entrega de webhooks).

Sem retry interno: quem chama decide o que fazer com a falha (a fila
de retry do motor de webhooks é o único lugar onde entregas são
repetidas).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class HttpClient:
    """Cliente HTTP com conexão reaproveitada entre requisições.

    Aceita um httpx.AsyncClient externo (ex: com MockTransport em
    testes); nesse caso o fechamento fica com quem o criou.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            verify=self._config.verify_ssl,
            headers=self._config.default_headers,
        )

    async def post(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
        timeout_seconds: float | None = None,
    ) -> httpx.Response:
        """POST JSON; qualquer resposta fora de 2xx vira HttpError.

        Raises:
            HttpError: status não-2xx, timeout, erro de conexão ou de leitura
                da resposta.
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        timeout = timeout_seconds if timeout_seconds is not None else self._config.timeout_seconds
        try:
            response = await self._client.post(
                url,
                json=json,
                headers=merged_headers,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            raise HttpError("http_timeout", is_retryable=True) from exc
        except httpx.TransportError as exc:
            raise HttpError("http_connection_error", is_retryable=True) from exc
        except httpx.HTTPError as exc:
            # Corpo com Content-Encoding inválido, excesso de redirects
            raise HttpError("http_request_error", is_retryable=True) from exc

        if not response.is_success:
            raise HttpError(
                "http_error_status",
                status_code=response.status_code,
                is_retryable=response.status_code == 429 or response.status_code >= 500,
            )
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
