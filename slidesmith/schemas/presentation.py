"""
Pydantic models for presentation planning and slide image generation.

Field names travel as camelCase on the wire (``apiConfig``, ``bulletPoints``)
and are snake_case attributes in Python. Either spelling is accepted on input.
"""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiProtocol(str, Enum):
    VERTEX_AI = "vertexai"
    OPENAI = "openai"


class TransportMode(str, Enum):
    DIRECT = "direct"
    PROXIED = "proxied"


class OpenAIImageEndpoint(str, Enum):
    """Calling convention used for OpenAI-compatible image generation."""

    CHAT = "chat"
    IMAGES = "images"


class SlideStyle(str, Enum):
    MINIMAL = "minimal"
    DETAILED = "detailed"
    CUSTOM = "custom"


class SlideStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiConfig(CamelModel):
    """Immutable snapshot of the upstream API settings for one call."""

    model_config = ConfigDict(frozen=True)

    protocol: ApiProtocol = Field(
        default=ApiProtocol.VERTEX_AI, description="Upstream wire protocol"
    )
    transport_mode: TransportMode = Field(
        default=TransportMode.DIRECT, description="Direct or proxied transport"
    )
    api_base: str = Field(default="", description="Upstream base URL")
    api_key: str = Field(default="", description="Upstream API key")
    content_model_id: str = Field(default="", description="Planning model id")
    image_model_id: str = Field(default="", description="Image model id")
    openai_image_endpoint: OpenAIImageEndpoint = Field(
        default=OpenAIImageEndpoint.CHAT,
        description="OpenAI image convention: chat images or /images/generations",
    )
    proxy_base_url: str = Field(
        default="", description="Base URL of the SlideSmith proxy server"
    )

    @field_validator("api_base", "proxy_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("api_key", "content_model_id", "image_model_id")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()

    def masked_key(self) -> str:
        """Return the API key with everything but the last four chars hidden."""
        if not self.api_key:
            return ""
        if len(self.api_key) <= 4:
            return "****"
        return f"****{self.api_key[-4:]}"


class PresentationConfig(CamelModel):
    page_count: int = Field(default=8, ge=1, le=50, description="Number of slides")
    language: str = Field(default="English", description="Output language")
    style: SlideStyle = Field(default=SlideStyle.MINIMAL, description="Deck style")
    custom_style_description: str | None = Field(
        None, description="Free-form style used when style is custom"
    )
    additional_prompt: str | None = Field(
        None, description="Extra instructions from the user"
    )


class SlideOutline(CamelModel):
    title: str = ""
    bullet_points: list[str] = Field(default_factory=list)
    visual_description: str = ""


class PlanResult(CamelModel):
    """Normalized planning result, identical for every protocol and transport."""

    title: str
    slides: list[SlideOutline]

    def to_slides(self) -> list[SlideContent]:
        return [
            SlideContent(
                id=uuid.uuid4().hex,
                page_number=index,
                title=outline.title,
                bullet_points=list(outline.bullet_points),
                visual_description=outline.visual_description,
            )
            for index, outline in enumerate(self.slides, start=1)
        ]


class SlideContent(CamelModel):
    id: str
    page_number: int = 1
    title: str = ""
    bullet_points: list[str] = Field(default_factory=list)
    visual_description: str = ""
    status: SlideStatus = SlideStatus.PENDING
    image_data: str | None = None


class PlanRequest(CamelModel):
    """Body of ``POST /api/plan``."""

    document: str = Field(..., description="Source text to turn into slides")
    presentation_config: PresentationConfig = Field(
        default_factory=PresentationConfig
    )
    api_config: ApiConfig = Field(default_factory=ApiConfig)

    @field_validator("document")
    @classmethod
    def validate_document(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Document is required")
        return v


class ImageRequest(CamelModel):
    """Body of ``POST /api/gen``."""

    slide: SlideContent
    deck_title: str = ""
    presentation_config: PresentationConfig = Field(
        default_factory=PresentationConfig
    )
    api_config: ApiConfig = Field(default_factory=ApiConfig)


class ImageResult(CamelModel):
    image_data: str


class OptimizeRequest(CamelModel):
    """Body of ``POST /api/optimize``."""

    content: str = Field(..., min_length=1, description="Text to rewrite")
    api_config: ApiConfig = Field(default_factory=ApiConfig)


class OptimizeResult(CamelModel):
    content: str
