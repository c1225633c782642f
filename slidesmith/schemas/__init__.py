"""Pydantic schemas shared by the facade and the proxy routes."""

from .presentation import (
    ApiConfig,
    ApiProtocol,
    ImageRequest,
    ImageResult,
    OpenAIImageEndpoint,
    OptimizeRequest,
    OptimizeResult,
    PlanRequest,
    PlanResult,
    PresentationConfig,
    SlideContent,
    SlideOutline,
    SlideStatus,
    SlideStyle,
    TransportMode,
)

__all__ = [
    "ApiConfig",
    "ApiProtocol",
    "ImageRequest",
    "ImageResult",
    "OpenAIImageEndpoint",
    "OptimizeRequest",
    "OptimizeResult",
    "PlanRequest",
    "PlanResult",
    "PresentationConfig",
    "SlideContent",
    "SlideOutline",
    "SlideStatus",
    "SlideStyle",
    "TransportMode",
]
