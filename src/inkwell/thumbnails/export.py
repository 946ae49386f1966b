"""High-resolution export as an ordered chain of strategies.

Clipboard export tries, in order:
    1. the rasterizer's own clipboard export
    2. a fresh render written to the clipboard as a raw PNG blob
    3. a file download of that same bitmap
Each failed step is logged and the next one tried. Only when every step has
failed does the caller see an ExportError.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Sequence

from ..adapters.sinks import PNG_MIME
from ..core.model import Destination
from ..core.ports import ClipboardSink, FileSink, Rasterizer
from .options import DEFAULT_FILENAME, HIGH_RES, RenderOptions, normalize_app_state

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Every export strategy failed."""

    def __init__(self, destination: Destination, attempts: list[tuple[str, str]]):
        self.destination = destination
        self.attempts = attempts
        tried = "; ".join(f"{name}: {reason}" for name, reason in attempts) or "nothing to try"
        super().__init__(f"{destination.value} export failed ({tried})")


@dataclass(frozen=True)
class ExportResult:
    destination: Destination
    strategy: str
    path: Path | None = None


@dataclass
class ExportJob:
    rasterizer: Rasterizer
    elements: Sequence[Any]
    app_state: dict[str, Any]  # already normalized
    options: RenderOptions
    destination: Destination
    clipboard: ClipboardSink | None = None
    sink: FileSink | None = None
    filename: str = DEFAULT_FILENAME
    bitmap: bytes | None = None
    path: Path | None = None
    renders: int = field(default=0)

    async def render(self) -> bytes:
        # Later steps reuse the bitmap of earlier ones.
        if self.bitmap is None:
            self.bitmap = await self.rasterizer.render(self.elements, self.app_state, self.options)
            self.renders += 1
        return self.bitmap


class ExportStrategy(Protocol):
    name: str

    async def attempt(self, job: ExportJob) -> bool:
        pass


class DirectClipboard:
    name = "clipboard"

    async def attempt(self, job: ExportJob) -> bool:
        return bool(
            await job.rasterizer.export_to_clipboard(job.elements, job.app_state, job.options)
        )


class ClipboardBlob:
    name = "clipboard-blob"

    async def attempt(self, job: ExportJob) -> bool:
        if job.clipboard is None:
            return False
        bitmap = await job.render()
        job.clipboard.write({PNG_MIME: bitmap})
        return True


class Download:
    name = "download"

    async def attempt(self, job: ExportJob) -> bool:
        if job.sink is None:
            return False
        bitmap = await job.render()
        job.path = job.sink.save(bitmap, job.filename)
        return True


CLIPBOARD_CHAIN: tuple[ExportStrategy, ...] = (DirectClipboard(), ClipboardBlob(), Download())
FILE_CHAIN: tuple[ExportStrategy, ...] = (Download(),)


async def run_chain(job: ExportJob, strategies: Sequence[ExportStrategy]) -> ExportResult:
    attempts: list[tuple[str, str]] = []
    for strategy in strategies:
        try:
            ok = await strategy.attempt(job)
        except Exception as e:
            logger.warning("%s export step failed: %s", strategy.name, e)
            attempts.append((strategy.name, str(e) or type(e).__name__))
            continue
        if ok:
            logger.info("drawing exported via %s", strategy.name)
            return ExportResult(job.destination, strategy.name, job.path)
        logger.warning("%s export step unavailable", strategy.name)
        attempts.append((strategy.name, "unavailable"))

    logger.error("all %s export steps failed", job.destination.value)
    raise ExportError(job.destination, attempts)


class Exporter:
    def __init__(
        self,
        options: RenderOptions = HIGH_RES,
        clipboard: ClipboardSink | None = None,
        sink: FileSink | None = None,
        filename: str = DEFAULT_FILENAME,
    ):
        self.options = options
        self.clipboard = clipboard
        self.sink = sink
        self.filename = filename

    def chain(self, destination: Destination) -> tuple[ExportStrategy, ...]:
        match destination:
            case Destination.CLIPBOARD:
                return CLIPBOARD_CHAIN
            case Destination.FILE:
                return FILE_CHAIN

    async def export(
        self,
        rasterizer: Rasterizer,
        elements: Sequence[Any],
        app_state: dict[str, Any],
        destination: Destination,
    ) -> ExportResult:
        job = ExportJob(
            rasterizer=rasterizer,
            elements=elements,
            app_state=normalize_app_state(app_state, self.options),
            options=self.options,
            destination=destination,
            clipboard=self.clipboard,
            sink=self.sink,
            filename=self.filename,
        )
        return await run_chain(job, self.chain(destination))
