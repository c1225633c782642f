"""
Adapter for the proxied transport.

Instead of an upstream provider it targets the SlideSmith proxy endpoints,
which run the direct path server-side and stream back
``data: {chunk?, done?, result?, error?}`` records.
"""

from __future__ import annotations

from typing import Any

from slidesmith.schemas.presentation import (
    ApiConfig,
    PlanResult,
    PresentationConfig,
    SlideContent,
)

from .base import StreamAccumulator, StreamEvent, WireAdapter, WireRequest
from .errors import (
    ConfigurationError,
    MalformedOutputError,
    NoImageGeneratedError,
    StreamShapeError,
    error_from_kind,
)
from .normalizer import validate_plan_payload

PLAN_PATH = "/api/plan"
IMAGE_PATH = "/api/gen"
OPTIMIZE_PATH = "/api/optimize"


class ProxyAdapter(WireAdapter):
    def __init__(self, api_config: ApiConfig) -> None:
        super().__init__(api_config)
        if not api_config.proxy_base_url:
            raise ConfigurationError("Proxy base URL is not configured")

    def _request(self, path: str, body: dict[str, Any]) -> WireRequest:
        body["apiConfig"] = self.api_config.model_dump(mode="json", by_alias=True)
        return WireRequest(
            url=f"{self.api_config.proxy_base_url}{path}",
            headers={"Content-Type": "application/json"},
            body=body,
        )

    def build_plan_request(
        self, document: str, presentation_config: PresentationConfig
    ) -> WireRequest:
        return self._request(
            PLAN_PATH,
            {
                "document": document,
                "presentationConfig": presentation_config.model_dump(
                    mode="json", by_alias=True
                ),
            },
        )

    def parse_plan_stream_event(self, payload: dict[str, Any]) -> StreamEvent | None:
        if payload.get("error"):
            raise error_from_kind(payload.get("errorType"), str(payload["error"]))
        event = StreamEvent()
        chunk = payload.get("chunk")
        if isinstance(chunk, str):
            event.delta = chunk
        if payload.get("done") and payload.get("result") is not None:
            event.result = payload["result"]
        if not event.delta and event.result is None:
            return None
        return event

    def finish_plan(self, accumulator: StreamAccumulator) -> PlanResult:
        if accumulator.result is None:
            raise StreamShapeError("No result received from stream")
        return validate_plan_payload(accumulator.result)

    def build_image_request(
        self,
        slide: SlideContent,
        deck_title: str,
        presentation_config: PresentationConfig,
    ) -> WireRequest:
        return self._request(
            IMAGE_PATH,
            {
                "slide": slide.model_dump(mode="json", by_alias=True),
                "deckTitle": deck_title,
                "presentationConfig": presentation_config.model_dump(
                    mode="json", by_alias=True
                ),
            },
        )

    def parse_image_response(self, data: Any) -> str:
        image = data.get("imageData") if isinstance(data, dict) else None
        if not image:
            raise NoImageGeneratedError()
        return str(image)

    def build_optimize_request(self, content: str) -> WireRequest:
        return self._request(OPTIMIZE_PATH, {"content": content})

    def parse_optimize_response(self, data: Any) -> str:
        content = data.get("content") if isinstance(data, dict) else None
        if not content:
            raise MalformedOutputError("No text in response")
        return str(content)
