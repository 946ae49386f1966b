"""Configuration loader for inkwell.toml."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .format.inline import PREVIEW_LIMIT
from .thumbnails.options import DEFAULT_FILENAME, HIGH_RES, THUMBNAIL, RenderOptions

CONFIG_NAME = "inkwell.toml"


@dataclass
class PreviewConfig:
    """Note card preview configuration."""
    truncate: int = PREVIEW_LIMIT


@dataclass
class ExportConfig:
    """High-resolution export configuration."""
    render: RenderOptions
    filename: str = DEFAULT_FILENAME
    out: Path = Path("exports")


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"


@dataclass
class InkwellConfig:
    """Complete inkwell configuration."""
    preview: PreviewConfig
    thumbnail: RenderOptions
    export: ExportConfig
    logging: LoggingConfig


def _render_options(data: dict[str, Any], defaults: RenderOptions) -> RenderOptions:
    return RenderOptions(
        max_dimension=int(data.get("max_dimension", defaults.max_dimension)),
        padding=int(data.get("padding", defaults.padding)),
        scale=float(data.get("scale", defaults.scale)),
        background=str(data.get("background", defaults.background)),
        quality=float(data.get("quality", defaults.quality)),
    )


def load_config(config_path: Path | None = None) -> InkwellConfig:
    """
    Load configuration from inkwell.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/inkwell.toml

    Args:
        config_path: Explicit path to config file

    Returns:
        InkwellConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    # Search for config file
    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    # Parse preview config
    preview_data = toml_data.get("preview", {})
    preview_config = PreviewConfig(
        truncate=int(preview_data.get("truncate", PREVIEW_LIMIT))
    )

    # Parse thumbnail config
    thumbnail = _render_options(toml_data.get("thumbnail", {}), THUMBNAIL)

    # Parse export config
    export_data = toml_data.get("export", {})
    export_config = ExportConfig(
        render=_render_options(export_data, HIGH_RES),
        filename=str(export_data.get("filename", DEFAULT_FILENAME)),
        out=Path(export_data.get("out", "exports")),
    )

    # Parse logging config
    logging_data = toml_data.get("logging", {})
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "WARNING")).upper()
    )

    return InkwellConfig(
        preview=preview_config,
        thumbnail=thumbnail,
        export=export_config,
        logging=logging_config,
    )
