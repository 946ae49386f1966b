"""Tests for configuration loading."""

import os
import tempfile
from pathlib import Path

from inkwell.config import load_config
from inkwell.thumbnails.options import HIGH_RES, THUMBNAIL


def test_load_config_defaults():
    """Test loading config with defaults when no file exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(config_path=Path(tmpdir) / "missing.toml")

    # Should use defaults
    assert config.preview.truncate == 200
    assert config.thumbnail == THUMBNAIL
    assert config.export.render == HIGH_RES
    assert config.export.filename == "drawing.png"
    assert config.logging.level == "WARNING"


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "inkwell.toml"
        config_path.write_text("""
[preview]
truncate = 80

[thumbnail]
max_dimension = 256
quality = 0.5

[export]
scale = 3
filename = "sketch.png"
out = "out"

[logging]
level = "debug"
""")

        config = load_config(config_path=config_path)

        assert config.preview.truncate == 80
        assert config.thumbnail.max_dimension == 256
        assert config.thumbnail.quality == 0.5
        assert config.thumbnail.padding == THUMBNAIL.padding
        assert config.export.render.scale == 3.0
        assert config.export.render.max_dimension == HIGH_RES.max_dimension
        assert config.export.filename == "sketch.png"
        assert config.export.out == Path("out")
        assert config.logging.level == "DEBUG"


def test_load_config_search_cwd():
    """Test config search in current working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            Path(tmpdir, "inkwell.toml").write_text("""
[preview]
truncate = 42
""")

            config = load_config()
            assert config.preview.truncate == 42
        finally:
            os.chdir(orig_cwd)
