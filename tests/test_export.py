"""Tests for high-resolution export and its fallbacks."""

import asyncio
import tempfile
from pathlib import Path

import pytest

from inkwell.adapters.sinks import PNG_MIME, DirectorySink, MemoryClipboard
from inkwell.core.model import Destination
from inkwell.thumbnails import (
    HIGH_RES,
    DrawingThumbnail,
    Exporter,
    ExportError,
    RasterCapability,
)

RECT = {"type": "rectangle", "x": 0, "y": 0, "width": 10, "height": 10}


class ScriptedRasterizer:
    def __init__(self, direct=False, direct_raises=False, render_raises=False):
        self.direct = direct
        self.direct_raises = direct_raises
        self.render_raises = render_raises
        self.renders = []
        self.direct_calls = 0

    async def render(self, elements, app_state, options):
        self.renders.append((app_state, options))
        if self.render_raises:
            raise RuntimeError("render exploded")
        return b"\x89PNG-high"

    async def export_to_clipboard(self, elements, app_state, options):
        self.direct_calls += 1
        if self.direct_raises:
            raise PermissionError("clipboard denied")
        return self.direct


class BrokenClipboard:
    def write(self, items):
        raise OSError("clipboard busy")


def export(exporter, rasterizer, destination=Destination.CLIPBOARD):
    return asyncio.run(exporter.export(rasterizer, [RECT], {}, destination))


def test_direct_clipboard_first():
    """Test the rasterizer's own clipboard export wins when it works."""
    raster = ScriptedRasterizer(direct=True)
    clipboard = MemoryClipboard()
    result = export(Exporter(clipboard=clipboard), raster)

    assert result.strategy == "clipboard"
    assert raster.renders == []
    assert clipboard.read() is None


def test_fallback_to_clipboard_blob():
    """Test a failed direct export falls back to a PNG blob."""
    raster = ScriptedRasterizer(direct_raises=True)
    clipboard = MemoryClipboard()
    result = export(Exporter(clipboard=clipboard), raster)

    assert result.strategy == "clipboard-blob"
    assert clipboard.read(PNG_MIME) == b"\x89PNG-high"
    assert len(raster.renders) == 1


def test_fallback_to_download():
    """Test a broken clipboard falls back to a file download."""
    raster = ScriptedRasterizer()
    with tempfile.TemporaryDirectory() as d:
        sink = DirectorySink(Path(d))
        exporter = Exporter(clipboard=BrokenClipboard(), sink=sink, filename="sketch.png")
        result = export(exporter, raster)

        assert result.strategy == "download"
        assert result.path == Path(d) / "sketch.png"
        assert result.path.read_bytes() == b"\x89PNG-high"
    # blob step and download share one render
    assert len(raster.renders) == 1


def test_all_strategies_fail():
    """Test exhaustion surfaces an ExportError listing each attempt."""
    raster = ScriptedRasterizer(direct_raises=True, render_raises=True)
    exporter = Exporter(clipboard=MemoryClipboard(), sink=DirectorySink(Path("unused")))

    with pytest.raises(ExportError) as exc:
        export(exporter, raster)
    assert exc.value.destination is Destination.CLIPBOARD
    assert [name for name, _ in exc.value.attempts] == ["clipboard", "clipboard-blob", "download"]


def test_no_sinks_fail():
    """Test missing clipboard and sink count as failed steps."""
    with pytest.raises(ExportError) as exc:
        export(Exporter(), ScriptedRasterizer())
    assert exc.value.attempts[1] == ("clipboard-blob", "unavailable")
    assert exc.value.attempts[2] == ("download", "unavailable")


def test_file_destination_skips_clipboard():
    """Test file export goes straight to the download."""
    raster = ScriptedRasterizer(direct=True)
    with tempfile.TemporaryDirectory() as d:
        result = export(Exporter(sink=DirectorySink(Path(d))), raster, Destination.FILE)
        assert result.strategy == "download"
        assert result.path.name == "drawing.png"
    assert raster.direct_calls == 0


def test_export_uses_high_res_options():
    """Test export renders at double scale on white."""
    raster = ScriptedRasterizer()
    export(Exporter(clipboard=MemoryClipboard()), raster)
    app_state, options = raster.renders[0]
    assert options is HIGH_RES
    assert options.scale == 2.0
    assert app_state["exportScale"] == 2.0
    assert app_state["viewBackgroundColor"] == "#ffffff"


def test_thumbnail_export_skips_when_unavailable():
    """Test export is a no-op without a rasterizer or elements."""
    thumb = DrawingThumbnail(RasterCapability.of(None))
    assert asyncio.run(thumb.export_high_res([RECT], {}, Destination.CLIPBOARD)) is None

    thumb = DrawingThumbnail(RasterCapability.of(ScriptedRasterizer(direct=True)))
    assert asyncio.run(thumb.export_high_res([], {}, Destination.CLIPBOARD)) is None


def test_thumbnail_export_delegates():
    """Test a drawing exports through its exporter."""
    raster = ScriptedRasterizer(direct=True)
    thumb = DrawingThumbnail(RasterCapability.of(raster))
    result = asyncio.run(thumb.export_high_res([RECT], {}, Destination.CLIPBOARD))
    assert result.strategy == "clipboard"
    assert raster.direct_calls == 1


def test_directory_sink_keeps_basename():
    """Test downloads cannot escape the export directory."""
    with tempfile.TemporaryDirectory() as d:
        path = DirectorySink(Path(d)).save(b"x", "../../evil.png")
        assert path == Path(d) / "evil.png"


def test_memory_clipboard_rejects_empty():
    """Test writing nothing is an error."""
    with pytest.raises(ValueError):
        MemoryClipboard().write({})
