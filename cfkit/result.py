"""Query results for a single row."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from .serializers import Serializer


@dataclass(frozen=True)
class Column:
    """A stored cell: encoded name, encoded value and its clock."""

    name: bytes
    value: bytes
    clock: int


class ColumnFamilyResult:
    """The columns one read returned for a row, keyed by decoded name.

    Values stay encoded until asked for; ``get_value()`` decodes them with
    an explicit serializer or the one registered for the column.
    """

    def __init__(
        self,
        key: Any,
        columns: list[Column],
        name_serializer: Serializer,
        value_serializers: Mapping[Any, Serializer],
    ) -> None:
        self._key = key
        self._value_serializers = dict(value_serializers)
        self._columns: dict[Any, Column] = {
            name_serializer.from_bytes(column.name): column for column in columns
        }

    @property
    def key(self) -> Any:
        return self._key

    @property
    def column_names(self) -> list[Any]:
        return list(self._columns)

    @property
    def has_results(self) -> bool:
        return bool(self._columns)

    def get_column(self, name: Any) -> Column | None:
        return self._columns.get(name)

    def get_bytes(self, name: Any) -> bytes | None:
        column = self._columns.get(name)
        return column.value if column is not None else None

    def get_clock(self, name: Any) -> int | None:
        column = self._columns.get(name)
        return column.clock if column is not None else None

    def get_value(self, name: Any, serializer: Serializer | None = None) -> Any:
        """Decoded value of a column, or None if the row lacks it.

        Falls back to raw bytes when no serializer is given or registered.
        """
        column = self._columns.get(name)
        if column is None:
            return None
        if serializer is None:
            serializer = self._value_serializers.get(name)
        if serializer is None:
            return column.value
        return serializer.from_bytes(column.value)

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __iter__(self) -> Iterator[Any]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"ColumnFamilyResult(key={self._key!r}, columns={self.column_names!r})"
