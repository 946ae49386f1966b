from pathlib import Path
from typing import Protocol, Any, Sequence

from .model import NoteId, Segment


class ContentParser(Protocol):
    """
    Split raw note content into ordered text/drawing segments.
    MUST NOT raise on malformed drawing payloads.
    """

    def segment(self, content: str, preview: bool = False) -> list[Segment]:
        pass


class Rasterizer(Protocol):
    """
    Turn a drawing payload into a PNG bitmap. `options` is a RenderOptions.
    Implementations may raise; callers decide what a failure means.
    """

    async def render(
        self, elements: Sequence[dict[str, Any]], app_state: dict[str, Any], options: Any
    ) -> bytes:
        pass

    async def export_to_clipboard(
        self, elements: Sequence[dict[str, Any]], app_state: dict[str, Any], options: Any
    ) -> bool:
        pass


class ClipboardSink(Protocol):
    """
    Raw clipboard write, one payload per mime type.
    """

    def write(self, items: dict[str, bytes]) -> None:
        pass


class FileSink(Protocol):
    """
    Client-side download trigger.
    """

    def save(self, bitmap: bytes, filename: str) -> Path:
        pass


class IdGenerator(Protocol):
    def new_id(self) -> NoteId:
        pass
