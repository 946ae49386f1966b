from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

NoteId = str

NO_CONTENT = "No content available"


class Tab(str, Enum):
    FLOWS = "flows"
    SPACES = "spaces"
    HMMM = "hmmm"  # placeholder view, always empty


@dataclass(frozen=True)
class Range:
    start: int  # char offsets in the raw content
    end: int


@dataclass(frozen=True)
class Note:
    id: NoteId
    title: str
    content: str
    created_at: datetime = field(default_factory=datetime.now)
    space: str | None = None
    space_color: str | None = None


@dataclass(frozen=True)
class Space:
    id: str
    name: str
    color: str
    notes: tuple[Note, ...] = ()


@dataclass(frozen=True)
class TextSegment:
    raw: str  # untrimmed span as it appears in the content
    formatted: str
    truncated: bool = False
    range: Range | None = None
    kind: str = "text"


@dataclass(frozen=True)
class EmptySegment:
    """Sentinel emitted when a note has nothing worth showing."""

    raw: str = ""
    formatted: str = NO_CONTENT
    truncated: bool = False
    range: Range | None = None
    kind: str = "text"


@dataclass(frozen=True)
class DrawingSegment:
    raw: str  # the whole fenced block, markers included
    body: str  # JSON text between the markers
    elements: list[Any] = field(default_factory=list)
    app_state: dict[str, Any] = field(default_factory=dict)
    index: int = 0  # ordinal among the drawing blocks of the note
    range: Range | None = None
    kind: str = "drawing"


@dataclass(frozen=True)
class ErrorSegment:
    raw: str
    body: str
    index: int = 0
    range: Range | None = None
    kind: str = "error"


Segment = TextSegment | EmptySegment | DrawingSegment | ErrorSegment


@dataclass(frozen=True)
class DrawingSummary:
    element_count: int
    element_types: dict[str, int]
    colors: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return self.element_count == 0


class ThumbnailState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class ThumbnailEntry:
    identity: str | None = None
    bitmap: bytes | None = None  # last good PNG, kept across failures
    state: ThumbnailState = ThumbnailState.IDLE


class Destination(str, Enum):
    CLIPBOARD = "clipboard"
    FILE = "file"
