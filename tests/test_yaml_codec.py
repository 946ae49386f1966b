"""Tests for the YAML seed codec."""

import tempfile
from datetime import datetime
from itertools import count
from pathlib import Path

import pytest

from inkwell.adapters.yaml_codec import YamlSeedCodec
from inkwell.core.model import Note, Space


class CountingId:
    def __init__(self):
        self._next = count(1)

    def new_id(self):
        return f"id{next(self._next)}"


SEED = """
spaces:
  - {id: work, name: Work, color: "#f59f00"}
notes:
  - id: n1
    title: Trip
    content: beach
    created_at: 2024-03-01T09:30:00
  - title: Work
    content: deadline
    space: Work
    space_color: "#f59f00"
    created_at: 2024-03-02
"""


def test_decode_seed():
    """Test notes and spaces are read from YAML."""
    notes, spaces = YamlSeedCodec(CountingId()).decode(SEED)

    assert spaces == [Space(id="work", name="Work", color="#f59f00")]
    assert [n.id for n in notes] == ["n1", "id1"]
    assert notes[0].created_at == datetime(2024, 3, 1, 9, 30)
    assert notes[1].created_at == datetime(2024, 3, 2)
    assert notes[1].space == "Work"
    assert notes[0].space is None


def test_decode_empty_document():
    """Test an empty file is an empty notebook."""
    assert YamlSeedCodec(CountingId()).decode("") == ([], [])


def test_decode_rejects_non_mapping():
    """Test a top-level list is rejected."""
    with pytest.raises(ValueError):
        YamlSeedCodec(CountingId()).decode("- a\n- b\n")


def test_encode_then_load():
    """Test an encoded notebook loads back from disk."""
    codec = YamlSeedCodec(CountingId())
    notes = [
        Note(id="a", title="Draw", content="```drawing\n{}\n```", created_at=datetime(2024, 1, 1)),
        Note(id="b", title="Plain", content="x", created_at=datetime(2024, 1, 2), space="Home"),
    ]
    spaces = [Space(id="home", name="Home", color="#40c057")]

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "seed.yaml"
        path.write_text(codec.encode(notes, spaces), encoding="utf-8")
        assert codec.load(path) == (notes, spaces)
