"""
Prompt builders for presentation planning and slide image generation.

Pure functions: they turn a PresentationConfig and slide data into prompt
strings and the planning response schema, and know nothing about transports.
"""

from __future__ import annotations

from typing import Any

from slidesmith.schemas.presentation import (
    PresentationConfig,
    SlideContent,
    SlideStyle,
)

MAX_DOCUMENT_CHARS = 30000

_PLANNING_STYLES = {
    SlideStyle.MINIMAL: "Minimalist, high impact, few words",
    SlideStyle.DETAILED: "Detailed, educational, comprehensive",
}

_IMAGE_STYLES = {
    SlideStyle.MINIMAL: (
        "Modern, clean, lots of whitespace, corporate memphis or swiss style"
    ),
    SlideStyle.DETAILED: (
        "Professional, structured, grid layout, academic or technical style"
    ),
}


def build_planning_system_prompt(config: PresentationConfig) -> str:
    if config.style == SlideStyle.CUSTOM:
        style_line = f"Custom Style: {config.custom_style_description or ''}"
    else:
        style_line = f"Style: {_PLANNING_STYLES[config.style]}"

    lines = [
        "You are an expert presentation designer.",
        "Analyze the provided input (text or document) and split it into a "
        f"{config.page_count}-page presentation.",
        f"Output Language: {config.language}.",
        style_line,
    ]
    if config.additional_prompt:
        lines.append(
            f"Important Additional Instructions from User: {config.additional_prompt}"
        )
    lines.extend(
        [
            "",
            "Return a JSON object with a 'title' for the whole deck and an array "
            "of 'slides'.",
            "For each slide, provide:",
            "1. 'title': The slide headline.",
            "2. 'bulletPoints': 3-5 key points (text only).",
            "3. 'visualDescription': A highly detailed, artistic description of "
            "how the slide should look visually.",
        ]
    )
    return "\n".join(lines)


def build_planning_user_prompt(document: str) -> str:
    return f"Input Text:\n{document[:MAX_DOCUMENT_CHARS]}"


def planning_output_format_hint() -> str:
    """Format hint appended to the system prompt when no schema can be enforced."""
    return (
        "\n\nRespond with a single JSON object and nothing else, exactly in this "
        'shape: {"title": string, "slides": [{"title": string, '
        '"bulletPoints": [string], "visualDescription": string}]}'
    )


def planning_response_schema() -> dict[str, Any]:
    """Structured output schema enforced by Vertex-style models."""
    return {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "slides": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "title": {"type": "STRING"},
                        "bulletPoints": {
                            "type": "ARRAY",
                            "items": {"type": "STRING"},
                        },
                        "visualDescription": {"type": "STRING"},
                    },
                    "required": ["title", "bulletPoints", "visualDescription"],
                },
            },
        },
        "required": ["title", "slides"],
    }


def build_image_generation_prompt(
    slide: SlideContent, deck_title: str, config: PresentationConfig
) -> str:
    if config.style == SlideStyle.CUSTOM:
        style_context = config.custom_style_description or ""
    else:
        style_context = _IMAGE_STYLES[config.style]

    lines = [
        "Design a professional presentation slide.",
        "",
        "Context:",
        f"Presentation Title: {deck_title}",
        f"Slide Title: {slide.title}",
        f"Style Guide: {style_context}",
    ]
    if config.additional_prompt:
        lines.append(f"Additional Style Requirements: {config.additional_prompt}")
    lines.extend(
        [
            "",
            "Visual Instructions:",
            slide.visual_description,
            "",
            "Important:",
            "- Create a high-quality slide design.",
            "- Ensure the layout has clear space for text overlay.",
            "- Aspect Ratio 16:9.",
        ]
    )
    return "\n".join(lines)


def build_optimize_prompt(content: str) -> str:
    return (
        "Improve the following presentation content so it is clearer, more "
        f"professional and more engaging:\n\n{content}"
    )
