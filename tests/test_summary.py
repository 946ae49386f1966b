"""Tests for drawing and content summaries."""

import json

from inkwell.adapters.drawing_parser import segment
from inkwell.adapters.summary import describe_content, summarize_drawing
from inkwell.core.model import DrawingSegment


def drawing(elements):
    return f"```drawing\n{json.dumps({'elements': elements})}\n```"


def test_summarize_counts_types():
    """Test element counts per type."""
    seg = segment(drawing([
        {"type": "rectangle"},
        {"type": "arrow"},
        {"type": "rectangle"},
    ]))[0]
    assert isinstance(seg, DrawingSegment)

    summary = summarize_drawing(seg)
    assert summary.element_count == 3
    assert summary.element_types == {"rectangle": 2, "arrow": 1}
    assert not summary.is_empty


def test_summarize_colors_skip_defaults():
    """Test default black stroke and transparent fill are ignored."""
    seg = segment(drawing([
        {"type": "rectangle", "strokeColor": "#000000", "backgroundColor": "transparent"},
        {"type": "ellipse", "strokeColor": "#e03131", "backgroundColor": "#ffc9c9"},
    ]))[0]
    assert summarize_drawing(seg).colors == ("#e03131", "#ffc9c9")


def test_summarize_colors_dedup_and_cap():
    """Test colors are deduplicated, first-seen ordered and capped at five."""
    elements = [
        {"type": "line", "strokeColor": c, "backgroundColor": "transparent"}
        for c in ["#111111", "#222222", "#111111", "#333333", "#444444", "#555555", "#666666"]
    ]
    seg = segment(drawing(elements))[0]
    assert summarize_drawing(seg).colors == (
        "#111111", "#222222", "#333333", "#444444", "#555555",
    )


def test_summarize_empty_drawing():
    """Test an empty drawing."""
    seg = segment(drawing([]))[0]
    summary = summarize_drawing(seg)
    assert summary.is_empty
    assert summary.element_types == {}
    assert summary.colors == ()


def test_describe_content():
    """Test note card summary badges."""
    one = drawing([{"type": "text"}])
    assert describe_content("") == "Empty note"
    assert describe_content("just words") == "Text content only"
    assert describe_content(one) == "1 drawing only"
    assert describe_content(one + "\n" + one) == "2 drawings only"
    assert describe_content("hi\n" + one) == "1 drawing • Text content"
