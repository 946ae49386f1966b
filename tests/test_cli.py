"""Tests for the inkwell CLI commands."""

import json
import subprocess
import tempfile
from pathlib import Path

import pytest

from inkwell.adapters.pillow_rasterizer import PILLOW_AVAILABLE

RECT = {"type": "rectangle", "x": 0, "y": 0, "width": 100, "height": 50}

SEED = """
spaces:
  - {id: office, name: Office, color: "#f59f00"}
notes:
  - id: trip0001
    title: Trip
    content: beach
  - id: work0001
    title: Work
    content: deadline
    space: Office
"""


def fence(elements):
    return "```drawing\n" + json.dumps({"elements": elements}) + "\n```"


def run(*args, cwd=None, stdin=None):
    return subprocess.run(
        ["inkwell", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        input=stdin,
    )


def test_segments_text():
    """Test segments output for text and drawings."""
    with tempfile.TemporaryDirectory() as tmpdir:
        note = Path(tmpdir) / "note.md"
        note.write_text("**Hello**\n" + fence([RECT, RECT]) + "\n```drawing\n{oops\n```\n")

        result = run("segments", str(note), cwd=tmpdir)

        assert result.returncode == 0
        lines = result.stdout.splitlines()
        assert lines[0] == "text: <strong>Hello</strong>"
        assert lines[1] == "drawing 1: 2 elements (rectangle×2)"
        assert lines[2] == "drawing 2: invalid drawing data"


def test_segments_json_stdin():
    """Test JSON output reading from stdin."""
    with tempfile.TemporaryDirectory() as tmpdir:
        result = run("--json", "segments", "-", cwd=tmpdir, stdin="x" * 250)

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data[0]["kind"] == "text"
        assert data[0]["truncated"] is False

        preview = run("--json", "segments", "--preview", "-", cwd=tmpdir, stdin="x" * 250)
        assert json.loads(preview.stdout)[0]["truncated"] is True


def test_summary():
    """Test the one-line content summary."""
    with tempfile.TemporaryDirectory() as tmpdir:
        result = run("summary", "-", cwd=tmpdir, stdin="hi\n" + fence([RECT]))
        assert result.returncode == 0
        assert result.stdout.strip() == "1 drawing • Text content"


def test_ls_with_seed():
    """Test listing notes of a view from a YAML seed."""
    with tempfile.TemporaryDirectory() as tmpdir:
        seed = Path(tmpdir) / "seed.yaml"
        seed.write_text(SEED)

        result = run("--seed", str(seed), "ls", cwd=tmpdir)
        assert result.returncode == 0
        assert [line.split("\t")[1] for line in result.stdout.splitlines()] == ["Trip", "Work"]

        result = run("--seed", str(seed), "--json", "ls", "--query", "dead", cwd=tmpdir)
        assert [n["id"] for n in json.loads(result.stdout)] == ["work0001"]

        result = run("--seed", str(seed), "ls", "--tab", "hmmm", cwd=tmpdir)
        assert result.stdout == ""


@pytest.mark.skipif(not PILLOW_AVAILABLE, reason="Pillow not installed")
def test_render_export_and_thumbnail():
    """Test rendering a drawing to PNG files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        note = Path(tmpdir) / "note.md"
        note.write_text("intro\n" + fence([RECT]))

        result = run("render", str(note), cwd=tmpdir)
        assert result.returncode == 0
        exported = Path(tmpdir) / "exports" / "drawing.png"
        assert exported.read_bytes().startswith(b"\x89PNG")

        result = run("render", str(note), "--thumbnail", "--out", "thumb.png", cwd=tmpdir)
        assert result.returncode == 0
        assert (Path(tmpdir) / "thumb.png").read_bytes().startswith(b"\x89PNG")


def test_render_missing_drawing():
    """Test rendering a drawing that does not exist."""
    with tempfile.TemporaryDirectory() as tmpdir:
        result = run("render", "-", "--index", "2", cwd=tmpdir, stdin=fence([RECT]))
        assert result.returncode == 1
        assert "Error" in result.stderr


def test_verbose_logs_runtime_wiring():
    """Test logging is configured before the runtime is built."""
    with tempfile.TemporaryDirectory() as tmpdir:
        result = run("-v", "summary", "-", cwd=tmpdir, stdin="hello")

        assert result.returncode == 0
        assert "inkwell.runtime - DEBUG - runtime ready" in result.stderr


def test_config_log_level_applies_to_wiring():
    """Test the configured level governs messages logged while wiring."""
    with tempfile.TemporaryDirectory() as tmpdir:
        Path(tmpdir, "inkwell.toml").write_text('[logging]\nlevel = "info"\n')
        seed = Path(tmpdir) / "seed.yaml"
        seed.write_text(SEED)

        result = run("--seed", str(seed), "summary", "-", cwd=tmpdir, stdin="hello")

        assert result.returncode == 0
        assert "loaded 2 notes and 1 spaces" in result.stderr
        assert "runtime ready" not in result.stderr
