"""Vertex/Gemini-style wire adapter speaking the generativelanguage REST contract."""

from __future__ import annotations

from typing import Any

from slidesmith.schemas.presentation import PresentationConfig, SlideContent

from .base import GeminiContent, WireAdapter, WireRequest
from .errors import MalformedOutputError, NoImageGeneratedError
from .normalizer import image_data_uri
from .prompts import (
    build_image_generation_prompt,
    build_optimize_prompt,
    build_planning_system_prompt,
    build_planning_user_prompt,
    planning_response_schema,
)


class VertexAdapter(WireAdapter):
    """Planning streams ``:streamGenerateContent?alt=sse``; images are single-shot."""

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_config.api_key,
        }

    def _url(self, model: str, method: str) -> str:
        return f"{self.api_config.api_base}/models/{model}:{method}"

    def build_plan_request(
        self, document: str, presentation_config: PresentationConfig
    ) -> WireRequest:
        body = {
            "systemInstruction": {
                "parts": [{"text": build_planning_system_prompt(presentation_config)}]
            },
            "contents": [_user_content(build_planning_user_prompt(document))],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": planning_response_schema(),
            },
        }
        return WireRequest(
            url=self._url(
                self.api_config.content_model_id, "streamGenerateContent?alt=sse"
            ),
            headers=self._headers(),
            body=body,
        )

    def parse_plan_stream_event(self, payload: dict[str, Any]) -> str | None:
        return _first_part_text(payload)

    def build_image_request(
        self,
        slide: SlideContent,
        deck_title: str,
        presentation_config: PresentationConfig,
    ) -> WireRequest:
        prompt = build_image_generation_prompt(slide, deck_title, presentation_config)
        body = {
            "contents": [_user_content(prompt)],
            "generationConfig": {"responseModalities": ["IMAGE", "TEXT"]},
        }
        return WireRequest(
            url=self._url(self.api_config.image_model_id, "generateContent"),
            headers=self._headers(),
            body=body,
        )

    def parse_image_response(self, data: Any) -> str:
        for part in _candidate_parts(data):
            inline = part.get("inlineData") or part.get("inline_data")
            if not isinstance(inline, dict):
                continue
            encoded = inline.get("data")
            if encoded:
                mime_type = inline.get("mimeType") or inline.get("mime_type")
                return image_data_uri(str(encoded), mime_type)
        raise NoImageGeneratedError()

    def build_optimize_request(self, content: str) -> WireRequest:
        prompt = build_optimize_prompt(content)
        return WireRequest(
            url=self._url(self.api_config.content_model_id, "generateContent"),
            headers=self._headers(),
            body={"contents": [_user_content(prompt)]},
        )

    def parse_optimize_response(self, data: Any) -> str:
        text = _first_part_text(data)
        if not text:
            raise MalformedOutputError("No text in response")
        return text


def _user_content(text: str) -> GeminiContent:
    return {"role": "user", "parts": [{"text": text}]}


def _candidate_parts(data: Any) -> list[dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return []
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return []
    return [part for part in parts if isinstance(part, dict)]


def _first_part_text(data: Any) -> str | None:
    parts = _candidate_parts(data)
    if not parts:
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) and text else None
