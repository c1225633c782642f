"""
Configuration module for SlideSmith (configs).
"""

import os
from typing import Any

from dotenv import load_dotenv

from slidesmith.schemas.presentation import (
    ApiConfig,
    ApiProtocol,
    OpenAIImageEndpoint,
    TransportMode,
)

load_dotenv()

DEFAULT_API_BASES = {
    ApiProtocol.VERTEX_AI: "https://generativelanguage.googleapis.com/v1beta",
    ApiProtocol.OPENAI: "https://api.openai.com/v1",
}
DEFAULT_CONTENT_MODELS = {
    ApiProtocol.VERTEX_AI: "gemini-2.5-flash",
    ApiProtocol.OPENAI: "gpt-4o",
}
DEFAULT_IMAGE_MODELS = {
    ApiProtocol.VERTEX_AI: "gemini-2.0-flash-exp",
    ApiProtocol.OPENAI: "gpt-image-1",
}


class Config:
    def __init__(self) -> None:
        # Logging / runtime
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_file = os.getenv("LOG_FILE")
        self.log_dir = os.getenv("LOG_DIR", "logs")
        self.port = int(os.getenv("PORT", "8000"))

        # Upstream request tuning
        self.request_timeout = float(os.getenv("SLIDESMITH_REQUEST_TIMEOUT", "180"))

        # Upstream provider defaults
        self.protocol = ApiProtocol(
            os.getenv("SLIDESMITH_PROTOCOL", ApiProtocol.VERTEX_AI.value).lower()
        )
        self.transport_mode = TransportMode(
            os.getenv("SLIDESMITH_TRANSPORT", TransportMode.DIRECT.value).lower()
        )
        self.api_base = (
            os.getenv("SLIDESMITH_API_BASE") or DEFAULT_API_BASES[self.protocol]
        ).strip().rstrip("/")
        self.api_key = os.getenv("SLIDESMITH_API_KEY")
        self.content_model = (
            os.getenv("SLIDESMITH_CONTENT_MODEL")
            or DEFAULT_CONTENT_MODELS[self.protocol]
        )
        self.image_model = (
            os.getenv("SLIDESMITH_IMAGE_MODEL") or DEFAULT_IMAGE_MODELS[self.protocol]
        )
        self.openai_image_endpoint = OpenAIImageEndpoint(
            os.getenv(
                "SLIDESMITH_OPENAI_IMAGE_ENDPOINT", OpenAIImageEndpoint.CHAT.value
            ).lower()
        )
        self.proxy_url = os.getenv("SLIDESMITH_PROXY_URL", "http://localhost:8000")

        # Rate limits for the proxy endpoints
        self.plan_rate_limit = os.getenv("PLAN_RATE_LIMIT", "10/minute")
        self.image_rate_limit = os.getenv("IMAGE_RATE_LIMIT", "30/minute")

        # CORS settings
        self.cors_origins = self._parse_cors_origins(
            os.getenv("CORS_ORIGINS", "http://localhost:3000")
        )

    def _parse_cors_origins(self, origins_str: str) -> list[str]:
        """Parse CORS origins from a comma-separated string."""
        if not origins_str:
            return ["http://localhost:3000"]
        return [origin.strip() for origin in origins_str.split(",") if origin.strip()]

    def api_config(self) -> ApiConfig | None:
        """Return an API configuration snapshot, or None when nothing is set up.

        Direct calls need a key; proxied calls can rely on the key held by
        the proxy server.
        """
        if not self.api_key and self.transport_mode == TransportMode.DIRECT:
            return None
        return ApiConfig(
            protocol=self.protocol,
            transport_mode=self.transport_mode,
            api_base=self.api_base,
            api_key=self.api_key or "",
            content_model_id=self.content_model,
            image_model_id=self.image_model,
            openai_image_endpoint=self.openai_image_endpoint,
            proxy_base_url=self.proxy_url,
        )

    def server_api_config(self, incoming: ApiConfig) -> ApiConfig:
        """Fill blank fields of a proxied request with the server-side defaults.

        The proxy always performs the upstream call itself, so the result is
        pinned to the direct transport. Server defaults only apply when the
        request speaks the same protocol the server is configured for, and the
        server key is only ever sent to the server's own upstream base URL.
        """
        updates: dict[str, Any] = {"transport_mode": TransportMode.DIRECT}
        protocol = incoming.protocol
        same_protocol = protocol == self.protocol
        own_upstream = incoming.api_base in ("", self.api_base.rstrip("/"))
        if not incoming.api_key and same_protocol and own_upstream and self.api_key:
            updates["api_key"] = self.api_key
        if not incoming.api_base:
            updates["api_base"] = (
                self.api_base if same_protocol else DEFAULT_API_BASES[protocol]
            )
        if not incoming.content_model_id:
            updates["content_model_id"] = (
                self.content_model
                if same_protocol
                else DEFAULT_CONTENT_MODELS[protocol]
            )
        if not incoming.image_model_id:
            updates["image_model_id"] = (
                self.image_model if same_protocol else DEFAULT_IMAGE_MODELS[protocol]
            )
        # Re-validate so server-side values are normalized like caller values
        return ApiConfig.model_validate({**incoming.model_dump(), **updates})


config = Config()
