"""Abstract cell store interface."""

from abc import ABC, abstractmethod
from typing import Iterable


def check_cell(key: str, value: object) -> None:
    if not isinstance(value, bytes):
        raise TypeError(f"Cell {key!r} must be bytes, got {type(value).__name__}")


class KVStore(ABC):
    """Ordered store of encoded cells, bytes only.

    Keys are strings whose lexicographic order is the cell order. Cell
    layout (row, column, clock) is decided by the session above.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Get a cell, or None if not found."""

    @abstractmethod
    def set_many(self, **cells: bytes) -> None:
        """Write several cells in one step."""

    @abstractmethod
    def scan(self, prefix: str) -> Iterable[tuple[str, bytes]]:
        """Iterate ``(key, value)`` pairs starting with prefix, in key order."""

    @abstractmethod
    def remove_many(self, *keys: str) -> None:
        """Remove several cells, ignoring missing ones."""
