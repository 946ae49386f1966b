"""Notes, spaces, search and tab state with derived note views."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable

from .graph import Graph
from .model import Note, NoteId, Space, Tab

logger = logging.getLogger(__name__)


def filter_notes(notes: tuple[Note, ...], query: str) -> tuple[Note, ...]:
    """Notes whose title or content contains `query`, ignoring case.

    A blank query returns `notes` itself.
    """
    if not query.strip():
        return notes
    needle = query.lower()
    return tuple(
        n for n in notes if needle in n.title.lower() or needle in n.content.lower()
    )


def view_notes(filtered: tuple[Note, ...], tab: Tab) -> tuple[Note, ...]:
    match tab:
        case Tab.FLOWS:
            return filtered
        case Tab.SPACES:
            return tuple(n for n in filtered if n.space)
        case Tab.HMMM:
            return ()


def as_tab(value: Tab | str) -> Tab:
    try:
        return Tab(value)
    except ValueError:
        raise ValueError(
            f"Unknown tab {value!r}; expected one of {[t.value for t in Tab]}"
        ) from None


class ViewState:
    """
    Source state: notes, search_query, active_tab, spaces.
    Derived state: filtered_notes reads {notes, search_query};
    current_view_notes reads {filtered_notes, active_tab}.
    """

    def __init__(
        self,
        notes: Iterable[Note] = (),
        spaces: Iterable[Space] = (),
        search_query: str = "",
        active_tab: Tab | str = Tab.FLOWS,
    ):
        self.graph = Graph()
        self._notes = self.graph.source("notes", tuple(notes))
        self._search = self.graph.source("search_query", search_query)
        self._tab = self.graph.source("active_tab", as_tab(active_tab))
        self._spaces = self.graph.source("spaces", tuple(spaces))

        self._filtered = self.graph.derived(
            "filtered_notes", (self._notes, self._search), filter_notes
        )
        self._current = self.graph.derived(
            "current_view_notes", (self._filtered, self._tab), view_notes
        )

    # Source state
    @property
    def notes(self) -> list[Note]:
        return list(self._notes.get())

    @property
    def spaces(self) -> list[Space]:
        return list(self._spaces.get())

    @property
    def search_query(self) -> str:
        return self._search.get()

    @property
    def active_tab(self) -> Tab:
        return self._tab.get()

    # Derived state
    @property
    def filtered_notes(self) -> list[Note]:
        return list(self._filtered.get())

    @property
    def current_view_notes(self) -> list[Note]:
        return list(self._current.get())

    def subscribe(self, key: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Watch one node by key ("notes", "filtered_notes", ...)."""
        node = self.graph.nodes.get(key)
        if node is None:
            raise KeyError(key)
        return self.graph.subscribe(node, callback)

    # Host UI triggers
    def set_search(self, query: str) -> None:
        self.graph.set(self._search, query)

    def set_tab(self, tab: Tab | str) -> None:
        self.graph.set(self._tab, as_tab(tab))

    def set_notes(self, notes: Iterable[Note]) -> None:
        self.graph.set(self._notes, tuple(notes))

    def set_spaces(self, spaces: Iterable[Space]) -> None:
        self.graph.set(self._spaces, tuple(spaces))

    def get_note(self, note_id: NoteId) -> Note:
        for note in self._notes.get():
            if note.id == note_id:
                return note
        raise KeyError(note_id)

    def add_note(self, note: Note) -> None:
        if any(n.id == note.id for n in self._notes.get()):
            raise ValueError(f"Note {note.id} already exists")
        # Newest first, like the host's list
        self.graph.set(self._notes, (note,) + self._notes.get())
        logger.debug("added note %s", note.id)

    def update_note(self, note_id: NoteId, **changes: Any) -> Note:
        current = self.get_note(note_id)
        updated = replace(current, **changes)
        self.graph.set(
            self._notes,
            tuple(updated if n.id == note_id else n for n in self._notes.get()),
        )
        return updated

    def delete_note(self, note_id: NoteId) -> Note:
        note = self.get_note(note_id)
        self.graph.set(
            self._notes, tuple(n for n in self._notes.get() if n.id != note_id)
        )
        logger.debug("deleted note %s", note_id)
        return note

    def add_space(self, space: Space) -> None:
        if any(s.id == space.id for s in self._spaces.get()):
            raise ValueError(f"Space {space.id} already exists")
        self.graph.set(self._spaces, self._spaces.get() + (space,))
