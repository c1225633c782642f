from __future__ import annotations

import abc
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Literal, Protocol, TypedDict

from slidesmith.schemas.presentation import (
    ApiConfig,
    PlanResult,
    PresentationConfig,
    SlideContent,
)

from .normalizer import normalize_plan_result

MessageRole = Literal["system", "user", "assistant"]

ProgressCallback = Callable[[str], Awaitable[None] | None]


class OpenAIChatMessage(TypedDict):
    role: MessageRole
    content: str


class GeminiTextPart(TypedDict):
    text: str


class GeminiContent(TypedDict):
    role: Literal["user", "model"]
    parts: list[GeminiTextPart]


@dataclass(frozen=True)
class WireRequest:
    """One fully built HTTP request, ready for a transport to send."""

    url: str
    headers: dict[str, str]
    body: dict[str, Any]
    method: str = "POST"


@dataclass
class StreamEvent:
    """What a line classifier extracted from one stream record."""

    delta: str = ""
    result: Any = None


@dataclass
class StreamAccumulator:
    """Per-call reassembly state. Never shared across calls."""

    buffer: str = ""
    full_text: str = ""
    result: Any = None
    received_bytes: int = 0


class LineClassifier(Protocol):
    event_prefix: str
    done_sentinel: str | None

    def parse_plan_stream_event(
        self, payload: dict[str, Any]
    ) -> StreamEvent | str | None: ...


class WireAdapter(abc.ABC):
    """Builds requests for, and parses responses of, one upstream contract."""

    event_prefix = "data:"
    done_sentinel: str | None = None

    def __init__(self, api_config: ApiConfig) -> None:
        self.api_config = api_config

    @abc.abstractmethod
    def build_plan_request(
        self, document: str, presentation_config: PresentationConfig
    ) -> WireRequest:
        """Return the streaming planning request."""

    @abc.abstractmethod
    def parse_plan_stream_event(
        self, payload: dict[str, Any]
    ) -> StreamEvent | str | None:
        """Extract the text delta of one decoded stream event, if any."""

    def finish_plan(self, accumulator: StreamAccumulator) -> PlanResult:
        """Turn the reassembled stream into the normalized plan."""
        return normalize_plan_result(accumulator.full_text)

    @abc.abstractmethod
    def build_image_request(
        self,
        slide: SlideContent,
        deck_title: str,
        presentation_config: PresentationConfig,
    ) -> WireRequest:
        """Return the single-shot image generation request."""

    @abc.abstractmethod
    def parse_image_response(self, data: Any) -> str:
        """Return the image as a data URI (or URL) or raise NoImageGeneratedError."""

    @abc.abstractmethod
    def build_optimize_request(self, content: str) -> WireRequest:
        """Return a single-shot request rewriting ``content``."""

    @abc.abstractmethod
    def parse_optimize_response(self, data: Any) -> str:
        """Return the text of a single-shot completion."""
