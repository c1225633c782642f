"""
Proxy routes performing upstream LLM calls on behalf of the caller.

The caller posts the logical request together with its API configuration;
blank settings are filled from the server environment so the upstream key
never has to leave the server. Planning progress is re-streamed as
``data: {chunk?, done?, result?, error?}`` records.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from loguru import logger

from slidesmith.configs.config import config
from slidesmith.core.rate_limit import limiter
from slidesmith.llm.errors import SlideGenerationError, status_code_for
from slidesmith.llm.provider import SlideGenerationClient
from slidesmith.schemas.presentation import (
    ImageRequest,
    ImageResult,
    OptimizeRequest,
    OptimizeResult,
    PlanRequest,
    PlanResult,
)

router = APIRouter(prefix="/api", tags=["generation"])


def get_http_client() -> httpx.AsyncClient | None:
    """Upstream HTTP client; None lets every call open its own."""
    return None


HttpClient = Annotated[httpx.AsyncClient | None, Depends(get_http_client)]


def _sse(payload: dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def _error_response(error: SlideGenerationError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code_for(error),
        content={"error": error.message, "errorType": error.kind},
    )


async def _plan_events(
    client: SlideGenerationClient, payload: PlanRequest
) -> AsyncIterator[str]:
    queue: asyncio.Queue[str | None] = asyncio.Queue()
    task = asyncio.create_task(
        client.plan_presentation(
            payload.document, payload.presentation_config, on_chunk=queue.put_nowait
        )
    )
    task.add_done_callback(lambda _: queue.put_nowait(None))

    result: PlanResult
    try:
        while True:
            chunk = await queue.get()
            if chunk is None:
                break
            yield _sse({"chunk": chunk})
        result = task.result()
    except SlideGenerationError as e:
        logger.warning(f"Plan request failed ({e.kind}): {e.message}")
        yield _sse({"error": e.message, "errorType": e.kind})
        return
    except Exception as e:  # noqa: BLE001 - reported in-band, status already sent
        logger.exception("Unexpected error while planning presentation")
        yield _sse({"error": str(e) or "Internal server error"})
        return
    finally:
        if not task.done():
            task.cancel()

    yield _sse({"done": True, "result": result.model_dump(mode="json", by_alias=True)})


@router.post("/plan")
@limiter.limit(config.plan_rate_limit)
async def plan_endpoint(
    request: Request, payload: PlanRequest, http_client: HttpClient
) -> StreamingResponse:
    """Plan a presentation upstream and stream the progress back."""
    api_config = config.server_api_config(payload.api_config)
    client = SlideGenerationClient(api_config, http_client=http_client)
    return StreamingResponse(
        _plan_events(client, payload),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/gen", response_model=ImageResult)
@limiter.limit(config.image_rate_limit)
async def generate_image_endpoint(
    request: Request, payload: ImageRequest, http_client: HttpClient
) -> Any:
    """Generate one slide image upstream."""
    api_config = config.server_api_config(payload.api_config)
    client = SlideGenerationClient(api_config, http_client=http_client)
    try:
        image = await client.generate_slide_image(
            payload.slide, payload.deck_title, payload.presentation_config
        )
    except SlideGenerationError as e:
        logger.warning(
            f"Image request for slide {payload.slide.id} failed ({e.kind}): {e.message}"
        )
        return _error_response(e)
    return {"imageData": image}


@router.post("/optimize", response_model=OptimizeResult)
@limiter.limit(config.plan_rate_limit)
async def optimize_endpoint(
    request: Request, payload: OptimizeRequest, http_client: HttpClient
) -> Any:
    """Rewrite presentation content to read more clearly."""
    api_config = config.server_api_config(payload.api_config)
    client = SlideGenerationClient(api_config, http_client=http_client)
    try:
        content = await client.optimize_content(payload.content)
    except SlideGenerationError as e:
        logger.warning(f"Optimize request failed ({e.kind}): {e.message}")
        return _error_response(e)
    return {"content": content}
