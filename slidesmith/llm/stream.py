"""
Server-Sent-Events reassembly shared by every protocol and transport.

Bytes are decoded incrementally, split into lines, and each ``data:`` line is
handed to the active line classifier. Unparseable lines are dropped; anything
the classifier raises propagates.
"""

from __future__ import annotations

import codecs
import inspect
import json
from collections.abc import AsyncIterable

from loguru import logger

from .base import LineClassifier, ProgressCallback, StreamAccumulator, StreamEvent
from .errors import StreamShapeError


async def _emit(on_chunk: ProgressCallback | None, delta: str) -> None:
    if on_chunk is None:
        return
    outcome = on_chunk(delta)
    if inspect.isawaitable(outcome):
        await outcome


async def _handle_line(
    line: str,
    classifier: LineClassifier,
    acc: StreamAccumulator,
    on_chunk: ProgressCallback | None,
) -> bool:
    """Process one line. Returns False once the done sentinel is seen."""
    line = line.rstrip("\r")
    if not line.startswith(classifier.event_prefix):
        return True
    data = line[len(classifier.event_prefix) :].strip()
    if classifier.done_sentinel is not None and data == classifier.done_sentinel:
        return False
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        logger.debug(f"Skipping unparseable stream line: {data[:80]!r}")
        return True
    if not isinstance(payload, dict):
        return True

    event = classifier.parse_plan_stream_event(payload)
    if event is None:
        return True
    if isinstance(event, str):
        event = StreamEvent(delta=event)
    if event.result is not None:
        acc.result = event.result
    if event.delta:
        acc.full_text += event.delta
        await _emit(on_chunk, event.delta)
    return True


async def reassemble_stream(
    chunks: AsyncIterable[bytes],
    classifier: LineClassifier,
    on_chunk: ProgressCallback | None = None,
) -> StreamAccumulator:
    """Consume an SSE byte stream and return the accumulated text.

    ``on_chunk`` receives each delta on its own, in network order.
    """
    acc = StreamAccumulator()
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    async for chunk in chunks:
        if not chunk:
            continue
        acc.received_bytes += len(chunk)
        acc.buffer += decoder.decode(chunk)
        lines = acc.buffer.split("\n")
        acc.buffer = lines.pop()
        for line in lines:
            if not await _handle_line(line, classifier, acc, on_chunk):
                acc.buffer = ""
                return acc

    acc.buffer += decoder.decode(b"", final=True)
    if acc.buffer:
        tail, acc.buffer = acc.buffer, ""
        await _handle_line(tail, classifier, acc, on_chunk)

    if acc.received_bytes == 0:
        raise StreamShapeError("No response body")
    return acc
