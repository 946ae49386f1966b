"""Process-wide rasterizer handle, resolved at most once."""

import logging
from typing import Callable

from ..core.ports import Rasterizer

logger = logging.getLogger(__name__)

Loader = Callable[[], Rasterizer | None]


class RasterCapability:
    """
    Optional handle to a Rasterizer.

    Until `resolve()` has run, and afterwards if the loader produced nothing,
    the capability is unavailable and callers skip rasterization instead of
    treating it as an error.
    """

    def __init__(self, loader: Loader):
        self._loader = loader
        self._resolved = False
        self._handle: Rasterizer | None = None

    @classmethod
    def of(cls, rasterizer: Rasterizer | None) -> "RasterCapability":
        """An already-resolved capability around `rasterizer`."""
        cap = cls(lambda: rasterizer)
        cap.resolve()
        return cap

    def resolve(self) -> Rasterizer | None:
        if self._resolved:
            return self._handle
        self._resolved = True
        try:
            self._handle = self._loader()
        except Exception as e:
            logger.error("Failed to load rasterizer: %s", e)
            self._handle = None
        if self._handle is None:
            logger.info("Rasterizer unavailable; thumbnails and export disabled")
        return self._handle

    @property
    def resolved(self) -> bool:
        return self._resolved

    @property
    def available(self) -> bool:
        return self._handle is not None

    @property
    def handle(self) -> Rasterizer | None:
        return self._handle

