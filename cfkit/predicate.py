"""Slice predicates: which columns of a row a read returns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .serializers import Serializer

# Used for queries where we just ask for all columns
ALL_COLUMNS_COUNT = 2**31 - 1
ALL_COLUMNS_START = None
ALL_COLUMNS_END = None

DEFAULT_COUNT = 100


@dataclass(frozen=True)
class BytesPredicate:
    """An encoded slice predicate, as handed to a session.

    When ``column_names`` is non-empty the read selects exactly those
    columns and the range fields are ignored.
    """

    column_names: tuple[bytes, ...] = ()
    start: bytes | None = None
    finish: bytes | None = None
    reversed: bool = False
    count: int = DEFAULT_COUNT

    @property
    def by_names(self) -> bool:
        return bool(self.column_names)


class SlicePredicate:
    """Builder for the column selection of a read.

    Holds an ordered, duplicate-free list of column names and a
    range-plus-count specification. Name-based selection wins whenever
    at least one name is registered.

    Args:
        name_serializer: Serializer for column names.
        count: Maximum number of columns for range reads.
    """

    def __init__(self, name_serializer: Serializer, *, count: int = DEFAULT_COUNT) -> None:
        self._name_serializer = name_serializer
        self._column_names: list[Any] = []
        self._start: Any = ALL_COLUMNS_START
        self._finish: Any = ALL_COLUMNS_END
        self._reversed = False
        self._count = count

    # -- Name mode --

    @property
    def column_names(self) -> tuple[Any, ...]:
        return tuple(self._column_names)

    def add_column_name(self, name: Any) -> SlicePredicate:
        """Append a column name unless it is already present."""
        if name not in self._column_names:
            self._column_names.append(name)
        return self

    def set_column_names(self, *names: Any) -> SlicePredicate:
        """Replace the name list, dropping duplicates but keeping order."""
        self._column_names = []
        for name in names:
            self.add_column_name(name)
        return self

    @property
    def by_names(self) -> bool:
        return bool(self._column_names)

    # -- Range mode --

    def set_range(
        self,
        start: Any = ALL_COLUMNS_START,
        finish: Any = ALL_COLUMNS_END,
        reversed: bool = False,
        count: int | None = None,
    ) -> SlicePredicate:
        """Configure the range used when no column names are registered.

        ``None`` bounds are open. With ``reversed=True`` the slice is
        walked from ``start`` downwards, so ``start`` is the high bound.
        """
        self._start = start
        self._finish = finish
        self._reversed = reversed
        if count is not None:
            self._count = count
        return self

    def set_count(self, count: int) -> SlicePredicate:
        """Set the column limit for range reads.

        The value is not validated here; the store decides what it accepts.
        """
        self._count = count
        return self

    @property
    def count(self) -> int:
        return self._count

    @property
    def start(self) -> Any:
        return self._start

    @property
    def finish(self) -> Any:
        return self._finish

    @property
    def reversed(self) -> bool:
        return self._reversed

    # -- Encoding --

    def _encode_bound(self, bound: Any) -> bytes | None:
        if bound is None:
            return None
        return self._name_serializer.to_bytes(bound)

    def to_bytes_predicate(self) -> BytesPredicate:
        """Encode names and bounds with the name serializer."""
        if self._column_names:
            return BytesPredicate(
                column_names=tuple(
                    self._name_serializer.to_bytes(name) for name in self._column_names
                ),
                count=self._count,
            )
        return BytesPredicate(
            start=self._encode_bound(self._start),
            finish=self._encode_bound(self._finish),
            reversed=self._reversed,
            count=self._count,
        )

    def copy(self) -> SlicePredicate:
        other = SlicePredicate(self._name_serializer, count=self._count)
        other._column_names = list(self._column_names)
        other._start = self._start
        other._finish = self._finish
        other._reversed = self._reversed
        return other

    def __repr__(self) -> str:
        if self._column_names:
            return f"SlicePredicate(names={self._column_names!r})"
        return (
            f"SlicePredicate(start={self._start!r}, finish={self._finish!r}, "
            f"reversed={self._reversed}, count={self._count})"
        )
