#!/usr/bin/env python3
"""CLI helpers to exercise the planning and image generation facade."""

from __future__ import annotations

import argparse
import asyncio
import base64
import sys
from collections.abc import Sequence
from pathlib import Path

import httpx
from dotenv import load_dotenv
from rich.table import Table

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT_DIR))
for dotenv_name in (".env", ".env.local"):
    candidate = ROOT_DIR / dotenv_name
    if candidate.exists():
        load_dotenv(candidate, override=False)

from scripts._console_utils import get_console, status_label  # noqa: E402
from slidesmith.configs.config import config  # noqa: E402
from slidesmith.llm import SlideGenerationClient, SlideGenerationError  # noqa: E402
from slidesmith.schemas.presentation import (  # noqa: E402
    PresentationConfig,
    SlideContent,
    SlideStyle,
)

console = get_console()


def _client(args: argparse.Namespace) -> SlideGenerationClient:
    return SlideGenerationClient(config.api_config(), timeout=args.timeout)


def _presentation_config(args: argparse.Namespace) -> PresentationConfig:
    return PresentationConfig(
        page_count=args.pages,
        language=args.language,
        style=SlideStyle(args.style),
        custom_style_description=args.custom_style,
        additional_prompt=args.extra,
    )


def _save_image(image: str, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    if image.startswith("data:"):
        _, _, encoded = image.partition("base64,")
        target.write_bytes(base64.b64decode(encoded))
        return
    response = httpx.get(image, timeout=60, follow_redirects=True)
    response.raise_for_status()
    target.write_bytes(response.content)


def cmd_check(args: argparse.Namespace) -> int:
    api_config = config.api_config()
    if api_config is None:
        console.print(
            status_label("FAIL", "bold red"),
            "No API configuration. Set SLIDESMITH_API_KEY or use a proxy.",
        )
        return 1
    table = Table(title="SlideSmith configuration")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("protocol", api_config.protocol.value)
    table.add_row("transport", api_config.transport_mode.value)
    table.add_row("api base", api_config.api_base)
    table.add_row("api key", api_config.masked_key() or "[dim]<unset>[/]")
    table.add_row("content model", api_config.content_model_id)
    table.add_row("image model", api_config.image_model_id)
    table.add_row("openai image endpoint", api_config.openai_image_endpoint.value)
    table.add_row("proxy url", api_config.proxy_base_url)
    table.add_row("timeout", f"{config.request_timeout:g}s")
    console.print(table)
    return 0


def cmd_plan(args: argparse.Namespace) -> int:
    source = Path(args.document).expanduser()
    try:
        document = source.read_text(encoding="utf-8")
    except OSError as exc:
        console.print(status_label("FAIL", "bold red"), f"Cannot read {source}: {exc}")
        return 1

    def _on_chunk(delta: str) -> None:
        if not args.quiet:
            console.print(delta, end="", markup=False, highlight=False)

    try:
        result = asyncio.run(
            _client(args).plan_presentation(
                document, _presentation_config(args), on_chunk=_on_chunk
            )
        )
    except SlideGenerationError as exc:
        console.print()
        console.print(
            status_label("FAIL", "bold red"), f"Planning failed ({exc.kind}): {exc}"
        )
        return 1

    console.print()
    table = Table(title=result.title)
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Bullet points")
    for index, slide in enumerate(result.slides, start=1):
        table.add_row(str(index), slide.title, "\n".join(slide.bullet_points))
    console.print(table)

    if args.output:
        output_path = Path(args.output).expanduser().resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            result.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        console.print(status_label("SAVE", "bold cyan"), str(output_path))
    return 0


def cmd_image(args: argparse.Namespace) -> int:
    slide = SlideContent(
        id="cli",
        title=args.title,
        visual_description=args.visual,
    )
    try:
        image = asyncio.run(
            _client(args).generate_slide_image(
                slide, args.deck_title or args.title, _presentation_config(args)
            )
        )
    except SlideGenerationError as exc:
        console.print(
            status_label("FAIL", "bold red"), f"Image failed ({exc.kind}): {exc}"
        )
        return 1

    target = Path(args.save).expanduser().resolve()
    try:
        _save_image(image, target)
    except (OSError, ValueError, httpx.HTTPError) as exc:
        console.print(status_label("WARN", "bold yellow"), f"Save failed: {exc}")
        return 1
    console.print(status_label("SAVE", "bold cyan"), str(target))
    return 0


def cmd_optimize(args: argparse.Namespace) -> int:
    try:
        content = asyncio.run(_client(args).optimize_content(args.text))
    except SlideGenerationError as exc:
        console.print(
            status_label("FAIL", "bold red"), f"Optimize failed ({exc.kind}): {exc}"
        )
        return 1
    console.print(status_label("OK", "bold green"), content)
    return 0


def _add_presentation_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--pages", type=int, default=8, help="Slide count.")
    parser.add_argument(
        "--language", default="English", help="Output language (default: English)."
    )
    parser.add_argument(
        "--style",
        choices=[style.value for style in SlideStyle],
        default=SlideStyle.MINIMAL.value,
        help="Deck style (default: minimal).",
    )
    parser.add_argument("--custom-style", help="Style description for --style custom.")
    parser.add_argument("--extra", help="Additional instructions for the model.")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Optional request timeout override (seconds).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SlideSmith LLM utilities.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Show the resolved API configuration."
    )
    check_parser.set_defaults(func=cmd_check)

    plan_parser = subparsers.add_parser(
        "plan", help="Plan a presentation from a text file, streaming progress."
    )
    plan_parser.add_argument("document", help="Path to a UTF-8 text document.")
    plan_parser.add_argument("--output", help="Optional path to save the plan JSON.")
    plan_parser.add_argument(
        "--quiet", action="store_true", help="Do not echo streamed output."
    )
    _add_presentation_arguments(plan_parser)
    plan_parser.set_defaults(func=cmd_plan)

    image_parser = subparsers.add_parser("image", help="Generate one slide image.")
    image_parser.add_argument("--title", required=True, help="Slide title.")
    image_parser.add_argument(
        "--visual", required=True, help="Visual description of the slide."
    )
    image_parser.add_argument("--deck-title", help="Deck title (default: slide title).")
    image_parser.add_argument(
        "--save",
        default="output/slide.png",
        help="Path to save the image (default: output/slide.png).",
    )
    _add_presentation_arguments(image_parser)
    image_parser.set_defaults(func=cmd_image)

    optimize_parser = subparsers.add_parser(
        "optimize", help="Rewrite presentation content."
    )
    optimize_parser.add_argument("text", help="Content to rewrite.")
    optimize_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Optional request timeout override (seconds).",
    )
    optimize_parser.set_defaults(func=cmd_optimize)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
