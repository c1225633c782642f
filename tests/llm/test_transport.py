"""Tests for the HTTP transport: error envelopes, timeouts and selection."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import httpx
import pytest

from fakes import make_api_config, sse, vertex_event
from slidesmith.llm.errors import (
    ConfigurationError,
    RequestTimeoutError,
    UpstreamError,
)
from slidesmith.llm.openai_adapter import OpenAIAdapter
from slidesmith.llm.proxy_adapter import ProxyAdapter
from slidesmith.llm.transport import (
    DirectTransport,
    HttpTransport,
    ProxiedTransport,
    _error_from_response,
    select_transport,
)
from slidesmith.llm.vertex_adapter import VertexAdapter
from slidesmith.schemas.presentation import (
    ApiProtocol,
    PresentationConfig,
    TransportMode,
)


@pytest.mark.parametrize(
    ("response", "message"),
    [
        (
            httpx.Response(401, json={"error": {"message": "API key not valid"}}),
            "API error: API key not valid",
        ),
        (httpx.Response(500, json={"error": "overloaded"}), "API error: overloaded"),
        (httpx.Response(422, json={"detail": "bad body"}), "API error: bad body"),
        (httpx.Response(503, text="upstream down"), "API error: upstream down"),
        (httpx.Response(502), "API error: Bad Gateway"),
    ],
)
def test_error_envelope_message(response: httpx.Response, message: str) -> None:
    error = _error_from_response(response)
    assert isinstance(error, UpstreamError)
    assert error.message == message
    assert error.status_code == response.status_code


def test_error_envelope_keeps_proxy_error_kind() -> None:
    response = httpx.Response(
        400, json={"error": "API key is not configured", "errorType": "configuration"}
    )
    error = _error_from_response(response)
    assert isinstance(error, ConfigurationError)
    assert error.message == "API key is not configured"


def test_select_transport() -> None:
    http = HttpTransport(5)
    direct_vertex = select_transport(make_api_config(ApiProtocol.VERTEX_AI), http)
    direct_openai = select_transport(make_api_config(ApiProtocol.OPENAI), http)
    proxied = select_transport(
        make_api_config(ApiProtocol.OPENAI, TransportMode.PROXIED), http
    )
    assert isinstance(direct_vertex, DirectTransport)
    assert isinstance(direct_vertex.adapter, VertexAdapter)
    assert isinstance(direct_openai.adapter, OpenAIAdapter)
    assert isinstance(proxied, ProxiedTransport)
    assert isinstance(proxied.adapter, ProxyAdapter)


@pytest.mark.asyncio
async def test_non_2xx_stream_is_reported_before_reading_events() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"message": "Permission denied"}})

    seen: list[str] = []
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = select_transport(make_api_config(), HttpTransport(5, client))
        with pytest.raises(UpstreamError, match="Permission denied") as excinfo:
            await transport.plan("doc", PresentationConfig(), seen.append)
    assert excinfo.value.status_code == 403
    assert seen == []


@pytest.mark.asyncio
async def test_connection_failure_is_an_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = select_transport(make_api_config(), HttpTransport(5, client))
        with pytest.raises(UpstreamError, match="connection refused"):
            await transport.optimize("text")


@pytest.mark.asyncio
async def test_timeout_cancels_stream_and_stops_callbacks() -> None:
    async def slow_body() -> AsyncIterator[bytes]:
        yield sse(vertex_event("AB"))
        await asyncio.sleep(30)
        yield sse(vertex_event("CD"))

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=slow_body())

    seen: list[str] = []
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = select_transport(make_api_config(), HttpTransport(0.2, client))
        with pytest.raises(RequestTimeoutError) as excinfo:
            await transport.plan("doc", PresentationConfig(), seen.append)
        await asyncio.sleep(0.05)

    assert excinfo.value.message == "Request timeout after 0.2 seconds"
    assert excinfo.value.timeout == 0.2
    assert seen == ["AB"]


@pytest.mark.asyncio
async def test_timeout_on_single_shot_request() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(30)
        return httpx.Response(200, json={})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = select_transport(make_api_config(), HttpTransport(0.1, client))
        with pytest.raises(RequestTimeoutError, match="after 0.1 seconds"):
            await transport.optimize("text")


@pytest.mark.asyncio
async def test_non_json_success_body_is_an_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = select_transport(make_api_config(), HttpTransport(5, client))
        with pytest.raises(UpstreamError, match="not JSON"):
            await transport.optimize("text")
