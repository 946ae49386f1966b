"""Request bodies for the local JSON API."""

from pydantic import BaseModel, field_validator

from ..core.model import Destination


class NoteIn(BaseModel):
    title: str
    content: str = ""
    space: str | None = None
    space_color: str | None = None


class NotePatch(BaseModel):
    title: str | None = None
    content: str | None = None
    space: str | None = None
    space_color: str | None = None

    @field_validator("title", "content")
    @classmethod
    def not_null(cls, value: str | None) -> str:
        # Omit a field to leave it unchanged; only space fields may be cleared
        if value is None:
            raise ValueError("must be a string, not null")
        return value


class SearchIn(BaseModel):
    query: str


class TabIn(BaseModel):
    tab: str


class SpaceIn(BaseModel):
    id: str | None = None
    name: str
    color: str = ""


class ExportIn(BaseModel):
    destination: Destination = Destination.CLIPBOARD
