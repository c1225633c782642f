"""
Result normalization for planning output and image payloads.

Models wrap JSON in Markdown fences or surround it with prose even when asked
not to. The cleanup heuristics live here, behind ``normalize_plan_result``,
so they can be tested and changed without touching the transports.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from slidesmith.schemas.presentation import PlanResult

from .errors import MalformedOutputError

_FENCE_OPEN = re.compile(r"^```[\w+-]*[ \t]*\r?\n?")
_FENCE_CLOSE = re.compile(r"\r?\n?```\s*$")
_PREVIEW_CHARS = 200


def _matching_brace(text: str, start: int) -> int:
    """Index of the brace closing the object opened at ``start``, or -1."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def clean_json_string(text: str) -> str:
    """Strip code fences and surrounding prose from a model's JSON answer."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE.sub("", cleaned, count=1).strip()

    start = cleaned.find("{")
    if start == -1:
        return cleaned
    end = _matching_brace(cleaned, start)
    if end == -1:
        end = cleaned.rfind("}")
    if end < start:
        return cleaned[start:]
    return cleaned[start : end + 1]


def _preview(text: str) -> str:
    flat = " ".join(text.split())
    if len(flat) > _PREVIEW_CHARS:
        return flat[:_PREVIEW_CHARS] + "..."
    return flat


def validate_plan_payload(payload: Any) -> PlanResult:
    """Validate an already decoded planning object."""
    if not isinstance(payload, dict):
        raise MalformedOutputError(
            f"Model output is not a JSON object: {_preview(str(payload))}"
        )
    try:
        return PlanResult.model_validate(payload)
    except ValidationError as e:
        raise MalformedOutputError(
            f"Model output does not match the presentation shape: "
            f"{e.error_count()} validation error(s)"
        ) from e


def normalize_plan_result(text: str) -> PlanResult:
    """Clean, decode and validate the reassembled planning text."""
    if not text or not text.strip():
        raise MalformedOutputError("Model returned no content")
    cleaned = clean_json_string(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(
            f"Model output is not valid JSON: {_preview(text)}"
        ) from e
    return validate_plan_payload(payload)


def image_data_uri(data: str, mime_type: str | None = None) -> str:
    """Wrap base64 image data into a data URI; existing URIs pass through."""
    if data.startswith("data:"):
        return data
    return f"data:{mime_type or 'image/png'};base64,{data}"
