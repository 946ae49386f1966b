import hashlib
import json
from dataclasses import dataclass
from typing import Any, Sequence

WHITE = "#ffffff"
DEFAULT_FILENAME = "drawing.png"


@dataclass(frozen=True)
class RenderOptions:
    max_dimension: int
    padding: int
    scale: float = 1.0
    background: str = WHITE
    quality: float = 0.8  # 0..1, lower means a smaller, coarser PNG


# Inline previews
THUMBNAIL = RenderOptions(max_dimension=400, padding=10, scale=1.0, quality=0.8)
# User-initiated export
HIGH_RES = RenderOptions(max_dimension=2000, padding=20, scale=2.0, quality=0.95)


def normalize_app_state(app_state: dict[str, Any], options: RenderOptions) -> dict[str, Any]:
    """Stored view state with export overrides: white background, light mode."""
    return {
        **app_state,
        "exportBackground": True,
        "viewBackgroundColor": options.background,
        "exportWithDarkMode": False,
        "theme": "light",
        "exportScale": options.scale,
    }


def content_identity(elements: Sequence[Any], app_state: dict[str, Any] | None) -> str:
    """SHA-256 over the canonical JSON of the payload."""
    canonical = json.dumps(
        {"elements": list(elements), "appState": app_state or {}},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
