import secrets
from typing import Iterable

from ..core.ports import IdGenerator


class HexId(IdGenerator):
    """
    Random hex ids, optionally prefixed ("n" -> "n3fa91c0b").
    An id is never handed out twice by the same generator; ids it is told
    about through `reserve` (seeded notes and spaces) are skipped too.
    """

    def __init__(self, nbytes: int = 4, prefix: str = ""):  # 4 bytes -> 8 hex chars
        if nbytes < 1:
            raise ValueError("nbytes must be at least 1")
        self.nbytes = nbytes
        self.prefix = prefix
        self._issued: set[str] = set()

    def reserve(self, ids: Iterable[str]) -> None:
        self._issued.update(ids)

    def new_id(self) -> str:
        while True:
            candidate = self.prefix + secrets.token_hex(self.nbytes)
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
