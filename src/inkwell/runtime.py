"""Runtime wiring helper for CLI and API applications."""

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from .adapters.drawing_parser import DrawingParser
from .adapters.idgen import HexId
from .adapters.pillow_rasterizer import load_rasterizer
from .adapters.sinks import DirectorySink, MemoryClipboard
from .adapters.yaml_codec import YamlSeedCodec
from .config import InkwellConfig, load_config
from .core.view import ViewState
from .notebook import Notebook
from .thumbnails.capability import RasterCapability
from .thumbnails.export import Exporter
from .thumbnails.pipeline import ThumbnailRegistry

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Container for all wired components."""
    notebook: Notebook
    capability: RasterCapability
    clipboard: MemoryClipboard
    sink: DirectorySink
    config: InkwellConfig


def build_runtime(
    config_path: Path | None = None,
    seed_path: Path | None = None,
    capability: RasterCapability | None = None,
    config: InkwellConfig | None = None,
) -> Runtime:
    """Build and wire all components; the rasterizer is resolved here, once."""
    if config is None:
        config = load_config(config_path=config_path)

    clipboard = MemoryClipboard()
    sink = DirectorySink(config.export.out)
    if capability is None:
        capability = RasterCapability(partial(load_rasterizer, clipboard=clipboard))
    capability.resolve()

    exporter = Exporter(
        options=config.export.render,
        clipboard=clipboard,
        sink=sink,
        filename=config.export.filename,
    )
    thumbnails = ThumbnailRegistry(capability, options=config.thumbnail, exporter=exporter)
    idgen = HexId()
    notebook = Notebook(
        view=ViewState(),
        parser=DrawingParser(preview_limit=config.preview.truncate),
        thumbnails=thumbnails,
        idgen=idgen,
    )

    if seed_path is not None:
        notes, spaces = YamlSeedCodec(idgen).load(seed_path)
        notebook.load(notes, spaces)
        idgen.reserve([n.id for n in notes] + [s.id for s in spaces])
        logger.info("loaded %d notes and %d spaces from %s", len(notes), len(spaces), seed_path)

    logger.debug("runtime ready (rasterizer available: %s)", capability.available)

    return Runtime(
        notebook=notebook,
        capability=capability,
        clipboard=clipboard,
        sink=sink,
        config=config,
    )
