"""Per-drawing thumbnail cache and generation state machine.

    IDLE -> GENERATING -> READY | FAILED

Each drawing instance owns one DrawingThumbnail. Requests are tagged with the
content identity of the payload they render. Only the identity that is
current when a render resolves may touch the cache; anything else is stale
and dropped. A failed render keeps the last good bitmap.
"""

import asyncio
import logging
from typing import Any, Sequence

from ..core.model import Destination, NoteId, ThumbnailEntry, ThumbnailState
from .capability import RasterCapability
from .export import Exporter, ExportResult
from .options import THUMBNAIL, RenderOptions, content_identity, normalize_app_state

logger = logging.getLogger(__name__)


class DrawingThumbnail:
    def __init__(
        self,
        capability: RasterCapability,
        options: RenderOptions = THUMBNAIL,
        exporter: Exporter | None = None,
        name: str = "drawing",
    ):
        self.capability = capability
        self.options = options
        self.exporter = exporter or Exporter()
        self.name = name
        self.entry = ThumbnailEntry()
        self._current: str | None = None
        self._inflight: dict[str, asyncio.Future] = {}

    @property
    def state(self) -> ThumbnailState:
        return self.entry.state

    @property
    def bitmap(self) -> bytes | None:
        return self.entry.bitmap

    @property
    def identity(self) -> str | None:
        return self._current

    def invalidate(self) -> None:
        """Forget the cached bitmap; in-flight renders become stale."""
        self._current = None
        self.entry = ThumbnailEntry()

    async def generate(
        self, elements: Sequence[Any], app_state: dict[str, Any] | None = None
    ) -> bytes | None:
        """
        Thumbnail PNG for the payload, or None when there is nothing to show
        (empty drawing, stale result, failed render with no earlier bitmap).
        Never raises for rasterization problems.
        """
        app_state = app_state or {}
        if not elements:
            self.invalidate()
            return None

        identity = content_identity(elements, app_state)
        self._current = identity

        rasterizer = self.capability.handle
        if rasterizer is None:
            return self.entry.bitmap

        entry = self.entry
        if entry.identity == identity and entry.state is ThumbnailState.READY:
            return entry.bitmap

        pending = self._inflight.get(identity)
        if pending is not None:
            return await asyncio.shield(pending)

        future = asyncio.get_running_loop().create_future()
        self._inflight[identity] = future
        self.entry = ThumbnailEntry(identity, entry.bitmap, ThumbnailState.GENERATING)
        result: bytes | None = None
        try:
            try:
                bitmap = await rasterizer.render(
                    elements, normalize_app_state(app_state, self.options), self.options
                )
            except Exception as e:
                if identity == self._current:
                    logger.warning("%s: thumbnail render failed: %s", self.name, e)
                    self.entry = ThumbnailEntry(identity, self.entry.bitmap, ThumbnailState.FAILED)
                    result = self.entry.bitmap
                else:
                    logger.debug("%s: dropping stale failure for %s", self.name, identity[:12])
            else:
                if identity == self._current:
                    self.entry = ThumbnailEntry(identity, bitmap, ThumbnailState.READY)
                    result = bitmap
                else:
                    logger.debug("%s: dropping stale thumbnail for %s", self.name, identity[:12])
            future.set_result(result)
        finally:
            self._inflight.pop(identity, None)
            if not future.done():
                # Owner was cancelled; coalesced waiters get the cached bitmap
                current = self.entry
                if current.identity == identity and current.state is ThumbnailState.GENERATING:
                    self.entry = entry
                future.set_result(self.entry.bitmap)
        return result

    async def export_high_res(
        self,
        elements: Sequence[Any],
        app_state: dict[str, Any] | None,
        destination: Destination,
    ) -> ExportResult | None:
        """
        Export at double scale. Returns None without trying anything when
        the drawing is empty or no rasterizer is available; raises
        ExportError once every fallback has failed.
        """
        rasterizer = self.capability.handle
        if rasterizer is None or not elements:
            return None
        return await self.exporter.export(rasterizer, elements, app_state or {}, destination)


class ThumbnailRegistry:
    """One DrawingThumbnail per (note id, drawing index)."""

    def __init__(
        self,
        capability: RasterCapability,
        options: RenderOptions = THUMBNAIL,
        exporter: Exporter | None = None,
    ):
        self.capability = capability
        self.options = options
        self.exporter = exporter or Exporter()
        self._items: dict[tuple[NoteId, int], DrawingThumbnail] = {}

    def get(self, note_id: NoteId, index: int) -> DrawingThumbnail:
        key = (note_id, index)
        thumb = self._items.get(key)
        if thumb is None:
            thumb = DrawingThumbnail(
                self.capability,
                options=self.options,
                exporter=self.exporter,
                name=f"{note_id}#{index}",
            )
            self._items[key] = thumb
        return thumb

    def peek(self, note_id: NoteId, index: int) -> DrawingThumbnail | None:
        return self._items.get((note_id, index))

    def discard_note(self, note_id: NoteId) -> int:
        return self.retain(note_id, ())

    def retain(self, note_id: NoteId, indices: Sequence[int]) -> int:
        """Drop the thumbnails of `note_id` whose index is not in `indices`."""
        keep = set(indices)
        dropped = 0
        for key in list(self._items):
            if key[0] == note_id and key[1] not in keep:
                self._items.pop(key).invalidate()
                dropped += 1
        return dropped

    def __len__(self) -> int:
        return len(self._items)
