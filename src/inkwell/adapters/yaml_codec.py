import io
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from ..core.model import Note, Space
from ..core.ports import IdGenerator


def _created_at(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return datetime.now()


class YamlSeedCodec:
    """
    Round-trip the in-memory notebook as a YAML document:

        spaces:
          - {id: work, name: Work, color: "#f59f00"}
        notes:
          - id: 1a2b3c4d
            title: Trip
            content: "beach"
            space: Work

    Notes without an id get one from `idgen`.
    """

    def __init__(self, idgen: IdGenerator):
        self.idgen = idgen

    def decode(self, text: str) -> tuple[list[Note], list[Space]]:
        data = yaml.safe_load(io.StringIO(text)) or {}
        if not isinstance(data, dict):
            raise ValueError("Seed file must be a mapping with 'notes' and/or 'spaces'")

        notes = [self._note(item) for item in data.get("notes") or []]
        spaces = [
            Space(
                id=str(item.get("id") or self.idgen.new_id()),
                name=str(item["name"]),
                color=str(item.get("color", "")),
            )
            for item in data.get("spaces") or []
        ]
        return notes, spaces

    def _note(self, item: dict[str, Any]) -> Note:
        return Note(
            id=str(item.get("id") or self.idgen.new_id()),
            title=str(item.get("title", "")),
            content=str(item.get("content", "")),
            created_at=_created_at(item.get("created_at")),
            space=item.get("space") or None,
            space_color=item.get("space_color") or None,
        )

    def encode(self, notes: list[Note], spaces: list[Space]) -> str:
        data: dict[str, Any] = {
            "spaces": [{"id": s.id, "name": s.name, "color": s.color} for s in spaces],
            "notes": [],
        }
        for n in notes:
            item: dict[str, Any] = {
                "id": n.id,
                "title": n.title,
                "content": n.content,
                "created_at": n.created_at.isoformat(),
            }
            if n.space:
                item["space"] = n.space
            if n.space_color:
                item["space_color"] = n.space_color
            data["notes"].append(item)
        buf = io.StringIO()
        yaml.safe_dump(data, buf, sort_keys=False, allow_unicode=True)
        return buf.getvalue()

    def load(self, path: Path) -> tuple[list[Note], list[Space]]:
        return self.decode(path.read_text(encoding="utf-8"))
