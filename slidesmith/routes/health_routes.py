"""
Health endpoint for the proxy server.

Reports whether an upstream key is configured server-side so the UI can
decide whether proxied calls need to forward their own key.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from slidesmith.configs.config import config

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict[str, Any]:
    """Return basic health info and the server-side upstream defaults."""
    return {
        "status": "ok",
        "protocol": config.protocol.value,
        "api_base": config.api_base,
        "upstream_key_configured": bool(config.api_key),
        "content_model": config.content_model,
        "image_model": config.image_model,
        "request_timeout": config.request_timeout,
    }
