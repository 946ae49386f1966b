"""Notes with embedded drawings: segments, thumbnails and filtered views."""

__version__ = "0.1.0"
