"""End-to-end tests of the generation facade over the direct transport."""

from __future__ import annotations

import httpx
import pytest

from fakes import PLAN_PAYLOAD, PNG_B64, FakeUpstream, make_api_config
from slidesmith.llm import (
    ConfigurationError,
    MalformedOutputError,
    NoImageGeneratedError,
    SlideGenerationClient,
    UpstreamError,
    generate_slide_image,
    optimize_content,
    plan_presentation,
)
from slidesmith.schemas.presentation import (
    ApiConfig,
    ApiProtocol,
    OpenAIImageEndpoint,
    PresentationConfig,
    SlideContent,
    TransportMode,
)

SLIDE = SlideContent(id="s1", title="Why solar", visual_description="Panels")


def _never_called(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "api_config",
    [
        None,
        make_api_config(api_key=""),
        make_api_config(api_base=""),
        make_api_config(content_model_id=""),
        make_api_config(transport_mode=TransportMode.PROXIED, proxy_base_url=""),
    ],
)
async def test_incomplete_config_fails_before_network(
    api_config: ApiConfig | None,
) -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(_never_called)) as http:
        client = SlideGenerationClient(api_config, http_client=http)
        with pytest.raises(ConfigurationError):
            await client.plan_presentation("doc", PresentationConfig())


@pytest.mark.asyncio
async def test_missing_image_model_only_blocks_images() -> None:
    api_config = make_api_config(image_model_id="")
    async with httpx.AsyncClient(transport=httpx.MockTransport(_never_called)) as http:
        with pytest.raises(ConfigurationError, match="Image model id"):
            await generate_slide_image(
                SLIDE,
                "Deck",
                PresentationConfig(),
                api_config=api_config,
                http_client=http,
            )


@pytest.mark.asyncio
async def test_unconfigured_message() -> None:
    with pytest.raises(ConfigurationError, match="API not configured"):
        await plan_presentation("doc", PresentationConfig(), api_config=None)


@pytest.mark.asyncio
@pytest.mark.parametrize("protocol", [ApiProtocol.VERTEX_AI, ApiProtocol.OPENAI])
async def test_plan_presentation_direct(
    fake_upstream: FakeUpstream, protocol: ApiProtocol
) -> None:
    seen: list[str] = []
    async with fake_upstream.client() as http:
        result = await plan_presentation(
            "Solar energy is great.",
            PresentationConfig(page_count=2),
            seen.append,
            api_config=make_api_config(protocol),
            http_client=http,
        )
    assert result.model_dump(by_alias=True) == PLAN_PAYLOAD
    assert "".join(seen) == fake_upstream.plan_text
    assert seen == fake_upstream.plan_deltas


@pytest.mark.asyncio
async def test_both_protocols_normalize_to_the_same_plan(
    fake_upstream: FakeUpstream,
) -> None:
    results = []
    async with fake_upstream.client() as http:
        for protocol in (ApiProtocol.VERTEX_AI, ApiProtocol.OPENAI):
            client = SlideGenerationClient(make_api_config(protocol), http_client=http)
            results.append(await client.plan_presentation("doc", PresentationConfig()))
    assert results[0] == results[1]


@pytest.mark.asyncio
async def test_plan_presentation_with_prose_output(fake_upstream: FakeUpstream) -> None:
    fake_upstream.plan_text = (
        'Here is the deck you asked for: {"title": "T", "slides": []} Enjoy!'
    )
    async with fake_upstream.client() as http:
        client = SlideGenerationClient(make_api_config(), http_client=http)
        result = await client.plan_presentation("doc", PresentationConfig())
    assert result.title == "T"
    assert result.slides == []


@pytest.mark.asyncio
async def test_plan_presentation_with_unusable_output(
    fake_upstream: FakeUpstream,
) -> None:
    fake_upstream.plan_text = "I'm sorry, I can't do that."
    async with fake_upstream.client() as http:
        client = SlideGenerationClient(make_api_config(), http_client=http)
        with pytest.raises(MalformedOutputError):
            await client.plan_presentation("doc", PresentationConfig())


@pytest.mark.asyncio
async def test_upstream_rejection(fake_upstream: FakeUpstream) -> None:
    fake_upstream.error = (400, {"error": {"message": "API key not valid"}})
    async with fake_upstream.client() as http:
        client = SlideGenerationClient(make_api_config(), http_client=http)
        with pytest.raises(UpstreamError, match="API key not valid"):
            await client.plan_presentation("doc", PresentationConfig())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "api_config",
    [
        make_api_config(ApiProtocol.VERTEX_AI),
        make_api_config(ApiProtocol.OPENAI),
        make_api_config(
            ApiProtocol.OPENAI, openai_image_endpoint=OpenAIImageEndpoint.IMAGES
        ),
    ],
)
async def test_generate_slide_image_direct(
    fake_upstream: FakeUpstream, api_config: ApiConfig
) -> None:
    async with fake_upstream.client() as http:
        image = await generate_slide_image(
            SLIDE,
            "Solar Power 101",
            PresentationConfig(),
            api_config=api_config,
            http_client=http,
        )
    assert image == f"data:image/png;base64,{PNG_B64}"
    assert len(fake_upstream.requests) == 1


@pytest.mark.asyncio
async def test_generate_slide_image_without_image(fake_upstream: FakeUpstream) -> None:
    fake_upstream.image_response = {
        "candidates": [{"content": {"parts": [{"text": "no picture today"}]}}]
    }
    async with fake_upstream.client() as http:
        client = SlideGenerationClient(make_api_config(), http_client=http)
        with pytest.raises(NoImageGeneratedError):
            await client.generate_slide_image(SLIDE, "Deck", PresentationConfig())


@pytest.mark.asyncio
@pytest.mark.parametrize("protocol", [ApiProtocol.VERTEX_AI, ApiProtocol.OPENAI])
async def test_optimize_content_direct(
    fake_upstream: FakeUpstream, protocol: ApiProtocol
) -> None:
    async with fake_upstream.client() as http:
        content = await optimize_content(
            "rough", api_config=make_api_config(protocol), http_client=http
        )
    assert content == "Sharper content"


@pytest.mark.asyncio
async def test_each_call_uses_its_own_config_snapshot(
    fake_upstream: FakeUpstream,
) -> None:
    async with fake_upstream.client() as http:
        await optimize_content(
            "a", api_config=make_api_config(api_key="first"), http_client=http
        )
        await optimize_content(
            "b", api_config=make_api_config(api_key="second"), http_client=http
        )
    keys = [request.headers["X-Goog-Api-Key"] for request in fake_upstream.requests]
    assert keys == ["first", "second"]


@pytest.mark.asyncio
async def test_image_without_config_fails_before_network() -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(_never_called)) as http:
        client = SlideGenerationClient(None, http_client=http)
        with pytest.raises(ConfigurationError, match="API not configured"):
            await client.generate_slide_image(SLIDE, "Deck", PresentationConfig())
