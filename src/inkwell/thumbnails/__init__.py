"""Drawing thumbnails and high-resolution export."""

from .capability import RasterCapability
from .export import Exporter, ExportError, ExportResult
from .options import HIGH_RES, THUMBNAIL, RenderOptions, content_identity
from .pipeline import DrawingThumbnail, ThumbnailRegistry

__all__ = [
    "RasterCapability",
    "Exporter",
    "ExportError",
    "ExportResult",
    "RenderOptions",
    "THUMBNAIL",
    "HIGH_RES",
    "content_identity",
    "DrawingThumbnail",
    "ThumbnailRegistry",
]
