from typing import MutableMapping, Iterator, Any

DEFAULT_STROKE = "#000000"
DEFAULT_FILL = "transparent"


class DrawingElement(MutableMapping[str, Any]):
    """
    One vector element of a drawing payload, e.g.
    - "type": "rectangle"
    - "strokeColor": "#e03131"
    - "backgroundColor": "transparent"
    Everything else (x, y, points, text, seed, ...) passes through untouched.
    """

    def __init__(self, initial: dict | None = None):
        self._d = dict(initial or {})

    # MutableMapping interface
    def __getitem__(self, k: str) -> Any:
        return self._d[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self._d[k] = v

    def __delitem__(self, k: str) -> None:
        del self._d[k]

    def __iter__(self) -> Iterator[str]:
        return iter(self._d)

    def __len__(self) -> int:
        return len(self._d)

    # Convenience
    def get_str(self, key: str, default: str | None = None) -> str | None:
        v = self._d.get(key, default)
        return v if isinstance(v, str) else default

    def get_num(self, key: str, default: float = 0.0) -> float:
        v = self._d.get(key, default)
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return default
        return float(v)

    @property
    def type(self) -> str | None:
        return self.get_str("type")

    @property
    def stroke_color(self) -> str:
        return self.get_str("strokeColor", DEFAULT_STROKE) or DEFAULT_STROKE

    @property
    def background_color(self) -> str:
        return self.get_str("backgroundColor", DEFAULT_FILL) or DEFAULT_FILL

    def to_dict(self) -> dict[str, Any]:
        return dict(self._d)
