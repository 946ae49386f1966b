"""Compact descriptions of note content that need no rasterizer."""

from ..core.element import DEFAULT_FILL, DEFAULT_STROKE, DrawingElement
from ..core.model import DrawingSegment, DrawingSummary
from .drawing_parser import DRAWING_RE

MAX_COLORS = 5


def summarize_drawing(segment: DrawingSegment) -> DrawingSummary:
    """
    Count elements per type and collect up to five palette colors.

    Colors come from strokeColor/backgroundColor in first-seen order;
    the default black stroke and transparent fill are skipped.
    """
    types: dict[str, int] = {}
    colors: list[str] = []

    for raw in segment.elements:
        if not isinstance(raw, dict):
            continue
        el = DrawingElement(raw)
        kind = el.type or "unknown"
        types[kind] = types.get(kind, 0) + 1

        stroke = el.get_str("strokeColor")
        if stroke and stroke != DEFAULT_STROKE and stroke not in colors:
            colors.append(stroke)
        fill = el.get_str("backgroundColor")
        if fill and fill != DEFAULT_FILL and fill not in colors:
            colors.append(fill)

    return DrawingSummary(
        element_count=len(segment.elements),
        element_types=types,
        colors=tuple(colors[:MAX_COLORS]),
    )


def describe_content(content: str) -> str:
    """One-line badge text for a note card."""
    drawings = len(DRAWING_RE.findall(content))
    has_text = bool(DRAWING_RE.sub("", content).strip())
    plural = "s" if drawings > 1 else ""

    if drawings and has_text:
        return f"{drawings} drawing{plural} • Text content"
    if drawings:
        return f"{drawings} drawing{plural} only"
    if has_text:
        return "Text content only"
    return "Empty note"
