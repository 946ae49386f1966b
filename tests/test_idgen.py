"""Tests for note id generation."""

import pytest

from inkwell.adapters.idgen import HexId


def test_default_shape():
    """Test ids are 8 lowercase hex characters by default."""
    note_id = HexId().new_id()
    assert len(note_id) == 8
    int(note_id, 16)


def test_prefix_and_size():
    """Test a prefix and a custom byte count."""
    note_id = HexId(nbytes=2, prefix="n").new_id()
    assert note_id.startswith("n")
    assert len(note_id) == 5


def test_ids_never_repeat():
    """Test one generator never hands out the same id twice."""
    idgen = HexId(nbytes=1)
    ids = [idgen.new_id() for _ in range(256)]
    assert len(set(ids)) == 256


def test_reserved_ids_skipped():
    """Test ids already in use are not generated."""
    idgen = HexId(nbytes=1)
    idgen.reserve(f"{i:02x}" for i in range(255))
    assert idgen.new_id() == "ff"


def test_invalid_size():
    """Test zero-byte ids are rejected."""
    with pytest.raises(ValueError):
        HexId(nbytes=0)
