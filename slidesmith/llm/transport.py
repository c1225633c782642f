"""
Transports: how a built request reaches the network.

``HttpTransport`` is the only code that touches httpx. ``DirectTransport``
pairs it with the wire adapter for the configured protocol;
``ProxiedTransport`` pairs it with the proxy adapter. Both share the stream
reassembler and the result normalizer.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import httpx
from loguru import logger

from slidesmith.schemas.presentation import (
    ApiConfig,
    ApiProtocol,
    PlanResult,
    PresentationConfig,
    SlideContent,
    TransportMode,
)

from .base import ProgressCallback, WireAdapter, WireRequest
from .errors import (
    RequestTimeoutError,
    SlideGenerationError,
    UpstreamError,
    error_from_kind,
)
from .openai_adapter import OpenAIAdapter
from .proxy_adapter import ProxyAdapter
from .stream import reassemble_stream
from .vertex_adapter import VertexAdapter

T = TypeVar("T")


def _error_from_response(response: httpx.Response) -> SlideGenerationError:
    """Build an error from a non-2xx response, preferring the provider's message."""
    status = response.status_code
    message: str | None = None
    kind: str | None = None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            message = err.get("message")
        elif isinstance(err, str):
            message = err
        if not message and isinstance(data.get("detail"), str):
            message = data["detail"]
        kind = data.get("errorType")
    if not message:
        message = response.text.strip() or response.reason_phrase or f"HTTP {status}"
    if kind:
        return error_from_kind(kind, message, status)
    return UpstreamError(f"API error: {message}", status)


class HttpTransport:
    """Sends WireRequests with httpx under one cancellation scope per call."""

    def __init__(
        self, timeout: float | None, client: httpx.AsyncClient | None = None
    ) -> None:
        self.timeout = timeout
        self._client = client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=None, follow_redirects=True) as client:
            yield client

    @asynccontextmanager
    async def open_stream(
        self, request: WireRequest
    ) -> AsyncIterator[AsyncIterator[bytes]]:
        """Open a streaming request and yield its raw byte chunks."""
        async with self._session() as client:
            async with client.stream(
                request.method, request.url, headers=request.headers, json=request.body
            ) as response:
                if response.is_error:
                    await response.aread()
                    raise _error_from_response(response)
                yield response.aiter_bytes()

    async def send_json(self, request: WireRequest) -> Any:
        async with self._session() as client:
            response = await client.request(
                request.method, request.url, headers=request.headers, json=request.body
            )
        if response.is_error:
            raise _error_from_response(response)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                f"API error: response is not JSON ({response.status_code})",
                response.status_code,
            ) from e

    async def bounded(self, call: Awaitable[T]) -> T:
        """Run ``call`` under the timeout; expiry cancels the in-flight request."""
        try:
            async with asyncio.timeout(self.timeout):
                return await call
        except TimeoutError as e:
            raise RequestTimeoutError.after(self.timeout or 0) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"API error: {str(e) or type(e).__name__}") from e


class Transport:
    """Runs the three logical operations for one adapter over HTTP."""

    mode: TransportMode

    def __init__(self, adapter: WireAdapter, http: HttpTransport) -> None:
        self.adapter = adapter
        self.http = http

    async def plan(
        self,
        document: str,
        presentation_config: PresentationConfig,
        on_chunk: ProgressCallback | None = None,
    ) -> PlanResult:
        request = self.adapter.build_plan_request(document, presentation_config)

        async def _run() -> PlanResult:
            async with self.http.open_stream(request) as chunks:
                acc = await reassemble_stream(chunks, self.adapter, on_chunk)
            logger.debug(f"Plan stream finished with {len(acc.full_text)} chars")
            return self.adapter.finish_plan(acc)

        return await self.http.bounded(_run())

    async def image(
        self,
        slide: SlideContent,
        deck_title: str,
        presentation_config: PresentationConfig,
    ) -> str:
        request = self.adapter.build_image_request(
            slide, deck_title, presentation_config
        )
        data = await self.http.bounded(self.http.send_json(request))
        return self.adapter.parse_image_response(data)

    async def optimize(self, content: str) -> str:
        request = self.adapter.build_optimize_request(content)
        data = await self.http.bounded(self.http.send_json(request))
        return self.adapter.parse_optimize_response(data)


class DirectTransport(Transport):
    mode = TransportMode.DIRECT

    def __init__(self, api_config: ApiConfig, http: HttpTransport) -> None:
        adapter: WireAdapter
        if api_config.protocol == ApiProtocol.OPENAI:
            adapter = OpenAIAdapter(api_config)
        else:
            adapter = VertexAdapter(api_config)
        super().__init__(adapter, http)


class ProxiedTransport(Transport):
    mode = TransportMode.PROXIED

    def __init__(self, api_config: ApiConfig, http: HttpTransport) -> None:
        super().__init__(ProxyAdapter(api_config), http)


def select_transport(api_config: ApiConfig, http: HttpTransport) -> Transport:
    if api_config.transport_mode == TransportMode.PROXIED:
        return ProxiedTransport(api_config, http)
    return DirectTransport(api_config, http)
