"""Store sessions: the collaborator a template flushes to and reads from."""

from __future__ import annotations

import logging
import time
from typing import Protocol, Sequence, runtime_checkable

from .clock import MicrosecondsClock
from .errors import InvalidRequestError
from .kv.base import KVStore
from .kv.memory import Memory
from .mutation import Mutation, MutationKind, MutationResult
from .predicate import BytesPredicate
from .result import Column

logger = logging.getLogger(__name__)

CLOCK_BYTES = 8
LIVE = b"\x00"
TOMBSTONE = b"\x01"
# Hex-encoded column names never contain "~", and it sorts after them.
ROW_MARKER = "~"


@runtime_checkable
class Session(Protocol):
    """Protocol for a wide-column store session.

    Implementations own transport, retries and timeouts. ``batch_mutate``
    and ``get_slice`` may raise whatever the store raises.
    """

    def create_clock(self) -> int: ...
    def batch_mutate(self, mutations: Sequence[Mutation]) -> MutationResult: ...
    def get_slice(
        self, column_family: str, key: bytes, predicate: BytesPredicate
    ) -> list[Column]: ...


def _encode_cell(clock: int, value: bytes | None) -> bytes:
    """A live cell, or a tombstone when value is None."""
    head = clock.to_bytes(CLOCK_BYTES, byteorder="big", signed=True)
    if value is None:
        return head + TOMBSTONE
    return head + LIVE + value


def _decode_cell(raw: bytes) -> tuple[int, bytes | None]:
    clock = int.from_bytes(raw[:CLOCK_BYTES], byteorder="big", signed=True)
    if raw[CLOCK_BYTES:CLOCK_BYTES + 1] == TOMBSTONE:
        return clock, None
    return clock, raw[CLOCK_BYTES + 1:]


class _CellBatch:
    """Cell changes of one batch, applied to the backend together.

    Reads see the batch's own earlier changes. Nothing reaches the
    backend until ``apply()``.
    """

    def __init__(self, store: KVStore) -> None:
        self._store = store
        self._changes: dict[str, bytes | None] = {}

    def get(self, key: str) -> bytes | None:
        if key in self._changes:
            return self._changes[key]
        return self._store.get(key)

    def scan(self, prefix: str) -> list[tuple[str, bytes]]:
        cells = dict(self._store.scan(prefix))
        for key, raw in self._changes.items():
            if not key.startswith(prefix):
                continue
            if raw is None:
                cells.pop(key, None)
            else:
                cells[key] = raw
        return sorted(cells.items())

    def set(self, key: str, raw: bytes) -> None:
        self._changes[key] = raw

    def remove(self, key: str) -> None:
        self._changes[key] = None

    def apply(self) -> None:
        removals = [key for key, raw in self._changes.items() if raw is None]
        writes = {key: raw for key, raw in self._changes.items() if raw is not None}
        if removals:
            self._store.remove_many(*removals)
        if writes:
            self._store.set_many(**writes)


class MemorySession:
    """Reference session storing cells in a ``KVStore``.

    Cell keys are ``<column family>/<row hex>/<name hex>`` so that key
    order equals raw column-name byte order within a row. Every cell
    carries its clock:

    - an insertion lands only if no newer cell and no tombstone at the
      same or a newer clock covers it;
    - a column deletion leaves a tombstone cell;
    - a row deletion leaves a ``<row>/~`` marker holding its clock and
      drops the cells it covers. Later insertions at or below that
      clock are ignored.

    A batch is resolved completely before any cell is written, so a batch
    rejected with ``InvalidRequestError`` changes nothing.

    Args:
        backend: Cell store (default: a fresh ``Memory``).
        clock: Clock source (default: ``MicrosecondsClock``).
    """

    def __init__(self, backend: KVStore | None = None, *, clock=None) -> None:
        self._store = backend if backend is not None else Memory()
        self._clock = clock if clock is not None else MicrosecondsClock()

    @property
    def backend(self) -> KVStore:
        return self._store

    def create_clock(self) -> int:
        return self._clock()

    # -- Layout --

    @staticmethod
    def _row_prefix(column_family: str, key: bytes) -> str:
        if not column_family or "/" in column_family:
            raise InvalidRequestError(f"Invalid column family: {column_family!r}")
        return f"{column_family}/{key.hex()}/"

    @staticmethod
    def _row_deleted_at(cells: _CellBatch | KVStore, prefix: str) -> int | None:
        raw = cells.get(prefix + ROW_MARKER)
        return None if raw is None else _decode_cell(raw)[0]

    # -- Writes --

    def batch_mutate(self, mutations: Sequence[Mutation]) -> MutationResult:
        started = time.perf_counter_ns()
        batch = _CellBatch(self._store)
        for mutation in mutations:
            if mutation.kind is MutationKind.INSERT:
                self._insert(batch, mutation)
            elif mutation.is_row_deletion:
                self._delete_row(batch, mutation)
            else:
                self._delete_column(batch, mutation)
        batch.apply()
        elapsed = (time.perf_counter_ns() - started) // 1000
        logger.debug("Applied %d mutation(s) in %dus", len(mutations), elapsed)
        return MutationResult(
            mutation_count=len(mutations), execution_time_micros=elapsed
        )

    def _insert(self, batch: _CellBatch, mutation: Mutation) -> None:
        if mutation.name_bytes is None or mutation.value_bytes is None:
            raise InvalidRequestError("Insertion requires a column name and value")
        prefix = self._row_prefix(mutation.column_family, mutation.key_bytes)
        row_deleted = self._row_deleted_at(batch, prefix)
        if row_deleted is not None and mutation.clock <= row_deleted:
            return
        cell_key = prefix + mutation.name_bytes.hex()
        existing = batch.get(cell_key)
        if existing is not None:
            clock, value = _decode_cell(existing)
            if clock > mutation.clock or (value is None and clock == mutation.clock):
                return
        batch.set(cell_key, _encode_cell(mutation.clock, mutation.value_bytes))

    def _delete_column(self, batch: _CellBatch, mutation: Mutation) -> None:
        if mutation.name_bytes is None:
            raise InvalidRequestError("Column deletion requires a name serializer")
        prefix = self._row_prefix(mutation.column_family, mutation.key_bytes)
        row_deleted = self._row_deleted_at(batch, prefix)
        if row_deleted is not None and mutation.clock <= row_deleted:
            return
        cell_key = prefix + mutation.name_bytes.hex()
        existing = batch.get(cell_key)
        if existing is not None and _decode_cell(existing)[0] > mutation.clock:
            return
        batch.set(cell_key, _encode_cell(mutation.clock, None))

    def _delete_row(self, batch: _CellBatch, mutation: Mutation) -> None:
        prefix = self._row_prefix(mutation.column_family, mutation.key_bytes)
        marker = prefix + ROW_MARKER
        row_deleted = self._row_deleted_at(batch, prefix)
        if row_deleted is not None and row_deleted >= mutation.clock:
            return
        batch.set(marker, _encode_cell(mutation.clock, None))
        for cell_key, raw in batch.scan(prefix):
            if cell_key != marker and _decode_cell(raw)[0] <= mutation.clock:
                batch.remove(cell_key)

    # -- Reads --

    def get_slice(
        self, column_family: str, key: bytes, predicate: BytesPredicate
    ) -> list[Column]:
        if predicate.count < 0:
            raise InvalidRequestError(f"count must be non-negative, got {predicate.count}")
        prefix = self._row_prefix(column_family, key)
        row_deleted = self._row_deleted_at(self._store, prefix)

        def live(raw: bytes) -> tuple[int, bytes] | None:
            clock, value = _decode_cell(raw)
            if value is None or (row_deleted is not None and clock <= row_deleted):
                return None
            return clock, value

        if predicate.by_names:
            columns = []
            for name in sorted(set(predicate.column_names)):
                raw = self._store.get(prefix + name.hex())
                cell = live(raw) if raw is not None else None
                if cell is not None:
                    columns.append(Column(name=name, value=cell[1], clock=cell[0]))
            return columns

        cells = [
            (bytes.fromhex(cell_key[len(prefix):]), raw)
            for cell_key, raw in self._store.scan(prefix)
            if cell_key != prefix + ROW_MARKER
        ]
        if predicate.reversed:
            cells.reverse()
            low, high = predicate.finish, predicate.start
        else:
            low, high = predicate.start, predicate.finish

        columns = []
        for name, raw in cells:
            if len(columns) >= predicate.count:
                break
            if low and name < low:
                continue
            if high and name > high:
                continue
            cell = live(raw)
            if cell is not None:
                columns.append(Column(name=name, value=cell[1], clock=cell[0]))
        return columns
