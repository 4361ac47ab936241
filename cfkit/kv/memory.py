"""In-memory cell store."""

import threading
from typing import Iterable

from .base import KVStore, check_cell
from .keys import SortedKeys


class Memory(KVStore):
    """Cells in a dict, ordered by a ``SortedKeys`` index.

    One lock guards both, so a store can be shared by sessions on
    several threads.
    """

    def __init__(self) -> None:
        self.cells: dict[str, bytes] = {}
        self._index = SortedKeys()
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self.cells.get(key)

    def set_many(self, **cells: bytes) -> None:
        for key, value in cells.items():
            check_cell(key, value)
        with self._lock:
            for key, value in cells.items():
                self.cells[key] = value
                self._index.add(key)

    def scan(self, prefix: str) -> Iterable[tuple[str, bytes]]:
        with self._lock:
            return [(key, self.cells[key]) for key in self._index.with_prefix(prefix)]

    def remove_many(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                if self.cells.pop(key, None) is not None:
                    self._index.discard(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self.cells)
