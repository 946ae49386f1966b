import json
import logging
import re
from dataclasses import replace
from typing import Any

from ..core.model import (
    DrawingSegment,
    EmptySegment,
    ErrorSegment,
    Range,
    Segment,
    TextSegment,
)
from ..core.ports import ContentParser
from ..format.inline import PREVIEW_LIMIT, format_inline, truncate

logger = logging.getLogger(__name__)

DRAWING_OPEN = "```drawing\n"
DRAWING_CLOSE = "\n```"
DRAWING_RE = re.compile(r"```drawing\n(.*?)\n```", re.DOTALL)


def _parse_drawing(raw: str, body: str, index: int, rng: Range) -> DrawingSegment | ErrorSegment:
    # Malformed payloads degrade to an ErrorSegment, they never raise.
    try:
        data = json.loads(body)
    except ValueError as e:
        logger.debug("drawing %d: invalid JSON (%s)", index, e)
        return ErrorSegment(raw=raw, body=body, index=index, range=rng)

    if not isinstance(data, dict):
        logger.debug("drawing %d: payload is %s, not an object", index, type(data).__name__)
        return ErrorSegment(raw=raw, body=body, index=index, range=rng)

    elements = data.get("elements") or []
    if not isinstance(elements, list):
        logger.debug("drawing %d: elements is not a list", index)
        return ErrorSegment(raw=raw, body=body, index=index, range=rng)

    app_state = data.get("appState") or {}
    if not isinstance(app_state, dict):
        app_state = {}

    return DrawingSegment(
        raw=raw,
        body=body,
        elements=elements,
        app_state=app_state,
        index=index,
        range=rng,
    )


def _text(raw: str, start: int) -> TextSegment:
    return TextSegment(
        raw=raw,
        formatted=format_inline(raw.strip()),
        range=Range(start, start + len(raw)),
    )


def split_content(content: str) -> list[Segment]:
    """
    Every span of `content` in order, whitespace-only text included.
    Joining the `raw` of the result gives back `content` exactly.
    """
    spans: list[Segment] = []
    offset = 0
    index = 0

    for m in DRAWING_RE.finditer(content):
        if m.start() > offset:
            spans.append(_text(content[offset : m.start()], offset))
        spans.append(
            _parse_drawing(m.group(0), m.group(1), index, Range(m.start(), m.end()))
        )
        index += 1
        offset = m.end()

    # An unterminated opening marker never matches, so it stays in this tail.
    if offset < len(content):
        spans.append(_text(content[offset:], offset))

    return spans


class DrawingParser(ContentParser):
    def __init__(self, preview_limit: int = PREVIEW_LIMIT):
        self.preview_limit = preview_limit

    def segment(self, content: str, preview: bool = False) -> list[Segment]:
        segments: list[Segment] = []

        for span in split_content(content):
            match span:
                case TextSegment():
                    if not span.raw.strip():
                        continue
                    if preview:
                        formatted, cut = truncate(span.formatted, self.preview_limit)
                        span = replace(span, formatted=formatted, truncated=cut)
                    segments.append(span)
                case DrawingSegment() | ErrorSegment():
                    segments.append(span)
                case EmptySegment():
                    pass

        if not segments:
            return [EmptySegment()]
        return segments


def segment(content: str, preview: bool = False) -> list[Segment]:
    return DrawingParser().segment(content, preview=preview)


def drawing_block(elements: list[Any], app_state: dict[str, Any] | None = None) -> str:
    """Serialize a payload as a fenced drawing block."""
    payload = {"elements": list(elements), "appState": dict(app_state or {})}
    return DRAWING_OPEN + json.dumps(payload, indent=2) + DRAWING_CLOSE


def replace_drawing(
    content: str, index: int, elements: list[Any], app_state: dict[str, Any] | None = None
) -> str:
    """
    Rewrite the body of the `index`-th drawing block. Everything outside
    that block stays byte-identical.
    """
    for i, m in enumerate(DRAWING_RE.finditer(content)):
        if i == index:
            return content[: m.start()] + drawing_block(elements, app_state) + content[m.end() :]
    raise IndexError(f"Drawing {index} not found")
