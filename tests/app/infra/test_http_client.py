"""Testes do HttpClient sobre httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from app.infra.http import HttpClient, HttpClientConfig, HttpError


def _client(handler: object, **config: object) -> tuple[HttpClient, httpx.AsyncClient]:
    transport_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpClient(HttpClientConfig(**config), client=transport_client), transport_client


@pytest.mark.asyncio
async def test_post_sends_json_and_merged_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    client, transport_client = _client(handler, default_headers={"User-Agent": "zap-bridge/test"})
    response = await client.post("http://x/hook", json={"a": 1}, headers={"X-Webhook-Event": "message"})

    assert response.status_code == 204
    assert json.loads(seen[0].content) == {"a": 1}
    assert seen[0].headers["User-Agent"] == "zap-bridge/test"
    assert seen[0].headers["X-Webhook-Event"] == "message"
    await client.aclose()
    assert transport_client.is_closed is False
    await transport_client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(("status_code", "retryable"), [(400, False), (429, True), (502, True)])
async def test_non_2xx_raises_http_error(status_code: int, retryable: bool) -> None:
    client, transport_client = _client(lambda request: httpx.Response(status_code))

    with pytest.raises(HttpError) as exc_info:
        await client.post("http://x/hook", json={})

    assert exc_info.value.status_code == status_code
    assert exc_info.value.is_retryable is retryable
    await transport_client.aclose()


@pytest.mark.asyncio
async def test_transport_errors_are_wrapped() -> None:
    def refused(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    for handler, message in ((refused, "http_connection_error"), (slow, "http_timeout")):
        client, transport_client = _client(handler)
        with pytest.raises(HttpError, match=message) as exc_info:
            await client.post("http://x/hook", json={})
        assert exc_info.value.status_code is None
        await transport_client.aclose()


@pytest.mark.asyncio
async def test_owned_client_is_closed() -> None:
    client = HttpClient()
    await client.aclose()
    assert client._client.is_closed is True


@pytest.mark.asyncio
async def test_undecodable_body_is_wrapped() -> None:
    def bad_gzip(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not-gzip"))

    client, transport_client = _client(bad_gzip)

    with pytest.raises(HttpError, match="http_request_error") as exc_info:
        await client.post("http://x/hook", json={})

    assert exc_info.value.is_retryable is True
    assert isinstance(exc_info.value.__cause__, httpx.DecodingError)
    await transport_client.aclose()
