"""Tests for prompt builders."""

from __future__ import annotations

from slidesmith.llm.prompts import (
    MAX_DOCUMENT_CHARS,
    build_image_generation_prompt,
    build_optimize_prompt,
    build_planning_system_prompt,
    build_planning_user_prompt,
)
from slidesmith.schemas.presentation import PresentationConfig, SlideContent, SlideStyle


def test_planning_prompt_reflects_config() -> None:
    prompt = build_planning_system_prompt(
        PresentationConfig(
            page_count=5,
            language="French",
            style=SlideStyle.DETAILED,
            additional_prompt="Target high school students",
        )
    )
    assert "5-page presentation" in prompt
    assert "Output Language: French." in prompt
    assert "Style: Detailed, educational, comprehensive" in prompt
    assert "Additional Instructions from User: Target high school students" in prompt


def test_planning_prompt_without_additional_instructions() -> None:
    prompt = build_planning_system_prompt(PresentationConfig())
    assert "Additional Instructions" not in prompt
    assert "Minimalist" in prompt


def test_user_prompt_truncates_long_documents() -> None:
    document = "x" * (MAX_DOCUMENT_CHARS + 500)
    prompt = build_planning_user_prompt(document)
    assert prompt.startswith("Input Text:\n")
    assert len(prompt) == len("Input Text:\n") + MAX_DOCUMENT_CHARS


def test_image_prompt_uses_custom_style() -> None:
    slide = SlideContent(id="1", title="Roadmap", visual_description="A winding road")
    prompt = build_image_generation_prompt(
        slide,
        "Q3 Plan",
        PresentationConfig(style=SlideStyle.CUSTOM, custom_style_description="Neon"),
    )
    assert "Presentation Title: Q3 Plan" in prompt
    assert "Slide Title: Roadmap" in prompt
    assert "Style Guide: Neon" in prompt
    assert "A winding road" in prompt
    assert "16:9" in prompt


def test_optimize_prompt_contains_content() -> None:
    assert build_optimize_prompt("draft text").endswith("\n\ndraft text")
