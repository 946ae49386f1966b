"""Rasterizer backed by Pillow (installed with the `render` extra)."""

import asyncio
import io
import math
from typing import Any, Callable, Sequence

try:
    from PIL import Image, ImageColor, ImageDraw, ImageFont

    PILLOW_AVAILABLE = True
except ImportError:
    PILLOW_AVAILABLE = False

from ..core.element import DrawingElement
from ..core.ports import ClipboardSink, Rasterizer
from .sinks import PNG_MIME

LINEAR_TYPES = {"line", "arrow", "freedraw"}
ARROW_HEAD = 12.0

Point = tuple[float, float]
Color = tuple[int, ...]


def _color(value: str | None, default: Color | None = None) -> Color | None:
    if not value or value == "transparent":
        return default
    try:
        return ImageColor.getrgb(value)[:3]
    except ValueError:
        return default


def _points(el: DrawingElement) -> list[Point]:
    x, y = el.get_num("x"), el.get_num("y")
    pts = []
    for p in el.get("points") or []:
        if isinstance(p, (list, tuple)) and len(p) >= 2:
            pts.append((x + float(p[0]), y + float(p[1])))
    return pts


def _box(el: DrawingElement) -> tuple[float, float, float, float]:
    if el.type in LINEAR_TYPES:
        pts = _points(el)
        if pts:
            xs = [p[0] for p in pts]
            ys = [p[1] for p in pts]
            return min(xs), min(ys), max(xs), max(ys)
    x, y = el.get_num("x"), el.get_num("y")
    w, h = el.get_num("width"), el.get_num("height")
    return min(x, x + w), min(y, y + h), max(x, x + w), max(y, y + h)


def _arrow_head(tip: Point, prev: Point, size: float) -> list[Point]:
    angle = math.atan2(tip[1] - prev[1], tip[0] - prev[0])
    spread = math.radians(25)
    return [
        (tip[0] - size * math.cos(angle - spread), tip[1] - size * math.sin(angle - spread)),
        tip,
        (tip[0] - size * math.cos(angle + spread), tip[1] - size * math.sin(angle + spread)),
    ]


def _draw_element(
    draw: Any, el: DrawingElement, at: Callable[[float, float], Point], scale: float
) -> None:
    stroke = _color(el.stroke_color, (0, 0, 0))
    fill = _color(el.background_color)
    width = max(1, round(el.get_num("strokeWidth", 1.0) * scale))
    left, top, right, bottom = _box(el)
    box = [at(left, top), at(right, bottom)]

    match el.type:
        case "rectangle":
            draw.rectangle(box, outline=stroke, fill=fill, width=width)
        case "ellipse":
            draw.ellipse(box, outline=stroke, fill=fill, width=width)
        case "diamond":
            cx, cy = (left + right) / 2, (top + bottom) / 2
            corners = [at(cx, top), at(right, cy), at(cx, bottom), at(left, cy)]
            draw.polygon(corners, outline=stroke, fill=fill, width=width)
        case "line" | "freedraw" | "arrow":
            pts = [at(*p) for p in _points(el)]
            if len(pts) >= 2:
                draw.line(pts, fill=stroke, width=width, joint="curve")
                if el.type == "arrow":
                    draw.line(_arrow_head(pts[-1], pts[-2], ARROW_HEAD * scale), fill=stroke, width=width)
        case "text":
            text = el.get_str("text", "") or ""
            size = max(8, round(el.get_num("fontSize", 20.0) * scale))
            font = ImageFont.load_default(size=size)
            draw.multiline_text(box[0], text, fill=stroke, font=font)
        case _:
            draw.rectangle(box, outline=stroke, width=width)


class PillowRasterizer(Rasterizer):
    def __init__(self, clipboard: ClipboardSink | None = None):
        self.clipboard = clipboard

    async def render(
        self, elements: Sequence[dict[str, Any]], app_state: dict[str, Any], options: Any
    ) -> bytes:
        return await asyncio.to_thread(self.render_sync, elements, app_state, options)

    async def export_to_clipboard(
        self, elements: Sequence[dict[str, Any]], app_state: dict[str, Any], options: Any
    ) -> bool:
        if self.clipboard is None:
            return False
        png = await self.render(elements, app_state, options)
        self.clipboard.write({PNG_MIME: png})
        return True

    def render_sync(
        self, elements: Sequence[dict[str, Any]], app_state: dict[str, Any], options: Any
    ) -> bytes:
        els = [
            DrawingElement(e)
            for e in elements
            if isinstance(e, dict) and not e.get("isDeleted")
        ]
        if not els:
            raise ValueError("Drawing has no visible elements")

        boxes = [_box(el) for el in els]
        min_x = min(b[0] for b in boxes)
        min_y = min(b[1] for b in boxes)
        max_x = max(b[2] for b in boxes)
        max_y = max(b[3] for b in boxes)

        pad = options.padding
        width = (max_x - min_x) + 2 * pad
        height = (max_y - min_y) + 2 * pad
        scale = options.scale
        longest = max(width, height) * scale
        if longest > options.max_dimension:
            scale = options.max_dimension / max(width, height)
        size = (max(1, round(width * scale)), max(1, round(height * scale)))

        background = None
        if app_state.get("exportBackground", True):
            background = _color(app_state.get("viewBackgroundColor"), _color(options.background))

        img = Image.new("RGBA", size, (*background, 255) if background else (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)

        def at(x: float, y: float) -> Point:
            return ((x - min_x + pad) * scale, (y - min_y + pad) * scale)

        for el in els:
            _draw_element(draw, el, at, scale)

        out = img.convert("RGB") if background else img
        if background and options.quality < 0.9:
            out = out.quantize(colors=max(16, int(256 * options.quality)))

        buf = io.BytesIO()
        out.save(buf, format="PNG", optimize=True)
        return buf.getvalue()


def load_rasterizer(clipboard: ClipboardSink | None = None) -> PillowRasterizer | None:
    """The Pillow rasterizer, or None when Pillow is not installed."""
    if not PILLOW_AVAILABLE:
        return None
    return PillowRasterizer(clipboard=clipboard)
