"""
LLM package exposing a protocol- and transport-agnostic facade.

Speaks the Vertex/Gemini-style and OpenAI-compatible REST contracts, either
directly or through the SlideSmith proxy.
"""

from .errors import (
    ConfigurationError,
    MalformedOutputError,
    NoImageGeneratedError,
    RequestTimeoutError,
    SlideGenerationError,
    StreamShapeError,
    UpstreamError,
)
from .provider import (
    SlideGenerationClient,
    generate_slide_image,
    optimize_content,
    plan_presentation,
)

__all__ = [
    "ConfigurationError",
    "MalformedOutputError",
    "NoImageGeneratedError",
    "RequestTimeoutError",
    "SlideGenerationClient",
    "SlideGenerationError",
    "StreamShapeError",
    "UpstreamError",
    "generate_slide_image",
    "optimize_content",
    "plan_presentation",
]
