"""
Generation facade and module-level helper functions.

The facade receives an ``ApiConfig`` snapshot, validates it before any
network activity, picks the transport once per call and hands back a
normalized result.
"""

from __future__ import annotations

import httpx
from loguru import logger

from slidesmith.configs.config import config
from slidesmith.schemas.presentation import (
    ApiConfig,
    PlanResult,
    PresentationConfig,
    SlideContent,
    TransportMode,
)

from .base import ProgressCallback
from .errors import ConfigurationError
from .transport import HttpTransport, Transport, select_transport


class SlideGenerationClient:
    """Plans decks and renders slide images for one API configuration."""

    def __init__(
        self,
        api_config: ApiConfig | None,
        *,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_config = api_config
        self.timeout = config.request_timeout if timeout is None else timeout
        self._http_client = http_client

    def _require_config(self, model_field: str) -> ApiConfig:
        api_config = self.api_config
        if api_config is None:
            raise ConfigurationError("API not configured")
        if api_config.transport_mode == TransportMode.PROXIED:
            if not api_config.proxy_base_url:
                raise ConfigurationError("Proxy base URL is not configured")
            return api_config
        if not api_config.api_key:
            raise ConfigurationError("API key is not configured")
        if not api_config.api_base:
            raise ConfigurationError("API base URL is not configured")
        if not getattr(api_config, model_field):
            label = "Content" if model_field == "content_model_id" else "Image"
            raise ConfigurationError(f"{label} model id is not configured")
        return api_config

    def _transport(self, model_field: str) -> Transport:
        api_config = self._require_config(model_field)
        http = HttpTransport(self.timeout, client=self._http_client)
        transport = select_transport(api_config, http)
        logger.info(
            f"Using {api_config.protocol.value} protocol over {transport.mode.value} "
            f"transport (model={getattr(api_config, model_field) or 'proxy default'})"
        )
        return transport

    async def plan_presentation(
        self,
        document: str,
        presentation_config: PresentationConfig,
        on_chunk: ProgressCallback | None = None,
    ) -> PlanResult:
        transport = self._transport("content_model_id")
        result = await transport.plan(document, presentation_config, on_chunk)
        logger.info(f"Planned '{result.title}' with {len(result.slides)} slides")
        return result

    async def generate_slide_image(
        self,
        slide: SlideContent,
        deck_title: str,
        presentation_config: PresentationConfig,
    ) -> str:
        transport = self._transport("image_model_id")
        image = await transport.image(slide, deck_title, presentation_config)
        logger.info(f"Generated image for slide {slide.page_number} ({slide.id})")
        return image

    async def optimize_content(self, content: str) -> str:
        transport = self._transport("content_model_id")
        return await transport.optimize(content)


async def plan_presentation(
    document: str,
    presentation_config: PresentationConfig,
    on_chunk: ProgressCallback | None = None,
    *,
    api_config: ApiConfig | None,
    timeout: float | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> PlanResult:
    client = SlideGenerationClient(
        api_config, timeout=timeout, http_client=http_client
    )
    return await client.plan_presentation(document, presentation_config, on_chunk)


async def generate_slide_image(
    slide: SlideContent,
    deck_title: str,
    presentation_config: PresentationConfig,
    *,
    api_config: ApiConfig | None,
    timeout: float | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> str:
    client = SlideGenerationClient(
        api_config, timeout=timeout, http_client=http_client
    )
    return await client.generate_slide_image(slide, deck_title, presentation_config)


async def optimize_content(
    content: str,
    *,
    api_config: ApiConfig | None,
    timeout: float | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> str:
    client = SlideGenerationClient(
        api_config, timeout=timeout, http_client=http_client
    )
    return await client.optimize_content(content)
