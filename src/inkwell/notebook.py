"""In-memory notebook: view state, content parsing and drawing thumbnails."""

import logging
from datetime import datetime
from typing import Any

from .adapters.drawing_parser import replace_drawing
from .core.model import Destination, DrawingSegment, Note, NoteId, Segment, Space
from .core.ports import ContentParser, IdGenerator
from .core.view import ViewState
from .thumbnails.export import ExportResult
from .thumbnails.options import content_identity
from .thumbnails.pipeline import ThumbnailRegistry

logger = logging.getLogger(__name__)


class Notebook:
    def __init__(
        self,
        view: ViewState,
        parser: ContentParser,
        thumbnails: ThumbnailRegistry,
        idgen: IdGenerator,
    ):
        self.view = view
        self.parser = parser
        self.thumbnails = thumbnails
        self.idgen = idgen

    def load(self, notes: list[Note], spaces: list[Space]) -> None:
        with self.view.graph.batch():
            self.view.set_spaces(spaces)
            self.view.set_notes(notes)

    def create_note(
        self,
        title: str,
        content: str = "",
        space: str | None = None,
        space_color: str | None = None,
        created_at: datetime | None = None,
    ) -> Note:
        note = Note(
            id=self.idgen.new_id(),
            title=title,
            content=content,
            created_at=created_at or datetime.now(),
            space=space or None,
            space_color=space_color or None,
        )
        self.view.add_note(note)
        return note

    def edit_note(self, note_id: NoteId, **changes: Any) -> Note:
        note = self.view.update_note(note_id, **changes)
        if "content" in changes:
            self._sync_thumbnails(note)
        return note

    def remove_note(self, note_id: NoteId) -> Note:
        note = self.view.delete_note(note_id)
        dropped = self.thumbnails.discard_note(note_id)
        if dropped:
            logger.debug("dropped %d thumbnails of note %s", dropped, note_id)
        return note

    def segments(self, note_id: NoteId, preview: bool = False) -> list[Segment]:
        return self.parser.segment(self.view.get_note(note_id).content, preview=preview)

    def drawing(self, note_id: NoteId, index: int) -> DrawingSegment:
        for seg in self.segments(note_id):
            if isinstance(seg, DrawingSegment) and seg.index == index:
                return seg
        raise KeyError(f"{note_id}#{index}")

    def update_drawing(
        self, note_id: NoteId, index: int, elements: list[Any], app_state: dict[str, Any] | None = None
    ) -> Note:
        content = replace_drawing(self.view.get_note(note_id).content, index, elements, app_state)
        return self.edit_note(note_id, content=content)

    async def thumbnail(self, note_id: NoteId, index: int) -> bytes | None:
        seg = self.drawing(note_id, index)
        return await self.thumbnails.get(note_id, index).generate(seg.elements, seg.app_state)

    async def export(self, note_id: NoteId, index: int, destination: Destination) -> ExportResult | None:
        seg = self.drawing(note_id, index)
        return await self.thumbnails.get(note_id, index).export_high_res(
            seg.elements, seg.app_state, destination
        )

    def _sync_thumbnails(self, note: Note) -> None:
        """Drop thumbnails of vanished drawings, invalidate those whose payload changed."""
        drawings = {
            s.index: s for s in self.parser.segment(note.content) if isinstance(s, DrawingSegment)
        }
        self.thumbnails.retain(note.id, list(drawings))
        for index, seg in drawings.items():
            thumb = self.thumbnails.peek(note.id, index)
            if thumb is None or thumb.identity is None:
                continue
            if thumb.identity != content_identity(seg.elements, seg.app_state):
                # In-flight renders of the old payload become stale
                thumb.invalidate()
