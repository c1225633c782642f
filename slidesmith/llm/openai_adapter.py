"""OpenAI-compatible wire adapter speaking the chat-completions contract."""

from __future__ import annotations

from typing import Any

from slidesmith.schemas.presentation import (
    OpenAIImageEndpoint,
    PresentationConfig,
    SlideContent,
)

from .base import OpenAIChatMessage, WireAdapter, WireRequest
from .errors import MalformedOutputError, NoImageGeneratedError
from .normalizer import image_data_uri
from .prompts import (
    build_image_generation_prompt,
    build_optimize_prompt,
    build_planning_system_prompt,
    build_planning_user_prompt,
    planning_output_format_hint,
)

IMAGE_SIZE = "1792x1024"


class OpenAIAdapter(WireAdapter):
    """Planning streams chat-completion deltas until ``data: [DONE]``.

    Unlike the Vertex path no schema is enforced: the response format is only
    ``json_object`` and the expected shape travels as a hint in the system
    prompt.
    """

    done_sentinel = "[DONE]"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_config.api_key}",
        }

    def _chat_request(self, body: dict[str, Any]) -> WireRequest:
        return WireRequest(
            url=f"{self.api_config.api_base}/chat/completions",
            headers=self._headers(),
            body=body,
        )

    def build_plan_request(
        self, document: str, presentation_config: PresentationConfig
    ) -> WireRequest:
        system_prompt = (
            build_planning_system_prompt(presentation_config)
            + planning_output_format_hint()
        )
        messages: list[OpenAIChatMessage] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": build_planning_user_prompt(document)},
        ]
        return self._chat_request(
            {
                "model": self.api_config.content_model_id,
                "messages": messages,
                "stream": True,
                "response_format": {"type": "json_object"},
            }
        )

    def parse_plan_stream_event(self, payload: dict[str, Any]) -> str | None:
        choice = _first(payload.get("choices"))
        delta = choice.get("delta") if choice else None
        content = delta.get("content") if isinstance(delta, dict) else None
        return content if isinstance(content, str) and content else None

    def build_image_request(
        self,
        slide: SlideContent,
        deck_title: str,
        presentation_config: PresentationConfig,
    ) -> WireRequest:
        prompt = build_image_generation_prompt(slide, deck_title, presentation_config)
        model = self.api_config.image_model_id
        if self.api_config.openai_image_endpoint == OpenAIImageEndpoint.IMAGES:
            return WireRequest(
                url=f"{self.api_config.api_base}/images/generations",
                headers=self._headers(),
                body={
                    "model": model,
                    "prompt": prompt,
                    "n": 1,
                    "size": IMAGE_SIZE,
                    "response_format": "b64_json",
                },
            )
        messages: list[OpenAIChatMessage] = [{"role": "user", "content": prompt}]
        return self._chat_request(
            {"model": model, "messages": messages, "modalities": ["image", "text"]}
        )

    def parse_image_response(self, data: Any) -> str:
        if not isinstance(data, dict):
            raise NoImageGeneratedError()
        if self.api_config.openai_image_endpoint == OpenAIImageEndpoint.IMAGES:
            item = _first(data.get("data"))
            if item:
                if item.get("b64_json"):
                    return image_data_uri(str(item["b64_json"]))
                if item.get("url"):
                    return str(item["url"])
            raise NoImageGeneratedError()

        choice = _first(data.get("choices"))
        message = choice.get("message") if choice else None
        images = message.get("images") if isinstance(message, dict) else None
        image = _first(images)
        image_url = image.get("image_url") if image else None
        url = image_url.get("url") if isinstance(image_url, dict) else None
        if not url:
            raise NoImageGeneratedError()
        return str(url)

    def build_optimize_request(self, content: str) -> WireRequest:
        prompt = build_optimize_prompt(content)
        messages: list[OpenAIChatMessage] = [{"role": "user", "content": prompt}]
        return self._chat_request(
            {"model": self.api_config.content_model_id, "messages": messages}
        )

    def parse_optimize_response(self, data: Any) -> str:
        choice = _first(data.get("choices")) if isinstance(data, dict) else None
        message = choice.get("message") if choice else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content:
            raise MalformedOutputError("No text in response")
        return str(content)


def _first(items: Any) -> dict[str, Any] | None:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None
