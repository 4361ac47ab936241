"""Disk-backed cell store using diskcache."""

import threading
from typing import Iterable, cast

from .base import KVStore, check_cell
from .keys import SortedKeys

ONE_GB = 1024 * 1024 * 1024


class Disk(KVStore):
    """Cell store backed by diskcache (SQLite + mmap).

    diskcache has no ordered key access, so key order lives in a
    ``SortedKeys`` index built once when the directory is opened and kept
    current by this instance's writes. Cells written to the same
    directory by another process after opening are readable with
    ``get()`` but not visible to ``scan()``.
    """

    def __init__(self, directory: str, size_limit: int = ONE_GB) -> None:
        from diskcache import Cache as DiskCache

        self.store = DiskCache(directory, size_limit=size_limit)
        self._index = SortedKeys(str(key) for key in self.store.iterkeys())
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        return cast(bytes | None, self.store.get(key))

    def set_many(self, **cells: bytes) -> None:
        for key, value in cells.items():
            check_cell(key, value)
        with self._lock, self.store.transact():
            for key, value in cells.items():
                self.store[key] = value
                self._index.add(key)

    def scan(self, prefix: str) -> Iterable[tuple[str, bytes]]:
        with self._lock:
            keys = self._index.with_prefix(prefix)
        for key in keys:
            value = self.store.get(key)
            if value is not None:
                yield key, cast(bytes, value)

    def remove_many(self, *keys: str) -> None:
        with self._lock, self.store.transact():
            for key in keys:
                self.store.delete(key, retry=False)
                self._index.discard(key)

    def close(self) -> None:
        self.store.close()
