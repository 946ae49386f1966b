from pathlib import Path

from ..core.ports import ClipboardSink, FileSink

PNG_MIME = "image/png"


class DirectorySink(FileSink):
    """Saves downloads into one directory; an existing file is overwritten."""

    def __init__(self, root: Path):
        self.root = root

    def _path(self, filename: str) -> Path:
        # Only the final path component is honoured.
        return self.root / Path(filename).name

    def save(self, bitmap: bytes, filename: str) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        p = self._path(filename)
        p.write_bytes(bitmap)
        return p


class MemoryClipboard(ClipboardSink):
    """Process-local clipboard; the host UI reads it back over the API."""

    def __init__(self) -> None:
        self.items: dict[str, bytes] = {}

    def write(self, items: dict[str, bytes]) -> None:
        if not items:
            raise ValueError("Nothing to write to the clipboard")
        self.items = dict(items)

    def read(self, mime: str = PNG_MIME) -> bytes | None:
        return self.items.get(mime)
