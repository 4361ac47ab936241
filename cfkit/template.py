"""ColumnFamilyTemplate: typed row/column operations on one column family."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .errors import ExceptionsTranslator
from .mutation import Mutator, MutationResult
from .predicate import DEFAULT_COUNT, SlicePredicate
from .result import ColumnFamilyResult
from .serializers import Serializer
from .session import Session
from .updater import TemplateUpdater

logger = logging.getLogger(__name__)


class ColumnFamilyTemplate:
    """Reusable read/write operations over a single column family.

    The template decides when staged mutations are flushed, which clock
    a write or delete carries, and which columns a read selects. It keeps
    no per-row state, so one template serves any number of rows.

    Configuration (registered columns, ``batched``, ``clock``, the slice
    count) is mutable and not thread-safe: configure first, or ``copy()``
    the template for each thread that needs to change it.

    Args:
        session: Store session to flush to and read from.
        column_family: Column family name.
        key_serializer: Serializer for row keys.
        top_serializer: Serializer for column names.
    """

    def __init__(
        self,
        session: Session,
        column_family: str,
        key_serializer: Serializer,
        top_serializer: Serializer,
    ) -> None:
        self._session = session
        self._column_family = column_family
        self._key_serializer = key_serializer
        self._top_serializer = top_serializer
        self._value_serializers: dict[Any, Serializer] = {}
        self._active_predicate = SlicePredicate(top_serializer)
        self._batched = False
        self._clock: int | None = None
        self._exceptions_translator: ExceptionsTranslator | None = None
        self.set_count(DEFAULT_COUNT)

    # -- Serializer registry --

    def add_column(self, name: Any, value_serializer: Serializer) -> ColumnFamilyTemplate:
        """Register a value serializer and add the column to the active predicate.

        Re-registering a name replaces its serializer; the name appears in
        the predicate only once.
        """
        if not isinstance(value_serializer, Serializer):
            raise TypeError(
                f"Expected a Serializer, got {type(value_serializer).__name__}"
            )
        self._value_serializers[name] = value_serializer
        self._active_predicate.add_column_name(name)
        return self

    def get_value_serializer(self, name: Any) -> Serializer | None:
        """The serializer registered for a column, or None."""
        return self._value_serializers.get(name)

    @property
    def value_serializers(self) -> dict[Any, Serializer]:
        return dict(self._value_serializers)

    # -- Configuration --

    @property
    def session(self) -> Session:
        return self._session

    @property
    def column_family(self) -> str:
        return self._column_family

    @property
    def key_serializer(self) -> Serializer:
        return self._key_serializer

    @property
    def top_serializer(self) -> Serializer:
        return self._top_serializer

    @property
    def active_predicate(self) -> SlicePredicate:
        return self._active_predicate

    @property
    def batched(self) -> bool:
        """When True, no operation flushes a caller-supplied mutator itself."""
        return self._batched

    def set_batched(self, batched: bool) -> ColumnFamilyTemplate:
        self._batched = batched
        return self

    @property
    def clock(self) -> int | None:
        return self._clock

    @clock.setter
    def clock(self, clock: int | None) -> None:
        self._clock = clock

    def set_count(self, count: int) -> ColumnFamilyTemplate:
        """The number of columns to return when not reading by name."""
        self._active_predicate.set_count(count)
        return self

    def set_exceptions_translator(
        self, translator: ExceptionsTranslator | None
    ) -> ColumnFamilyTemplate:
        self._exceptions_translator = translator
        return self

    def copy(self) -> ColumnFamilyTemplate:
        """An independent template sharing only the session."""
        other = ColumnFamilyTemplate(
            self._session, self._column_family, self._key_serializer, self._top_serializer
        )
        other._value_serializers = dict(self._value_serializers)
        other._active_predicate = self._active_predicate.copy()
        other._batched = self._batched
        other._clock = self._clock
        other._exceptions_translator = self._exceptions_translator
        return other

    # -- Clock --

    def effective_clock(self) -> int:
        """The override clock if set, else a fresh clock from the session."""
        if self._clock is not None:
            return self._clock
        return self._session.create_clock()

    # -- Batch control --

    @contextmanager
    def _store_call(self) -> Iterator[None]:
        try:
            yield
        except Exception as exc:
            if self._exceptions_translator is None:
                raise
            translated = self._exceptions_translator.translate(exc)
            if translated is exc:
                raise
            logger.warning(
                "Store error on %s translated to %s: %s",
                self._column_family,
                type(translated).__name__,
                exc,
            )
            raise translated from exc

    def create_mutator(self) -> Mutator:
        return Mutator(self._session, self._key_serializer)

    def execute_batch(self, mutator: Mutator) -> MutationResult:
        """Flush the mutator, then clear it.

        Serializer errors are raised untranslated before the session is
        called. If the flush fails the pending mutations are left in place
        and the error propagates; discard or retry is the caller's call.
        """
        mutator.encode()
        with self._store_call():
            result = mutator.execute()
        mutator.discard_pending_mutations()
        logger.debug(
            "Executed %d mutation(s) on %s", result.mutation_count, self._column_family
        )
        return result

    def execute_if_not_batched(
        self, mutator: Mutator | TemplateUpdater
    ) -> MutationResult | None:
        """Flush unless the template is batched, in which case return None."""
        if isinstance(mutator, TemplateUpdater):
            mutator = mutator.current_mutator
        if self._batched:
            logger.debug(
                "Deferring %d mutation(s) on %s", len(mutator), self._column_family
            )
            return None
        return self.execute_batch(mutator)

    # -- Deletes --

    def delete_row(self, key: Any, mutator: Mutator | None = None) -> MutationResult | None:
        """Delete every column of a row.

        Without a mutator the deletion is flushed immediately, batched or
        not. With one, it is staged there and flushed only if not batched.
        """
        immediate = mutator is None
        if mutator is None:
            mutator = self.create_mutator()
        mutator.add_deletion(
            key, self._column_family, None, self._top_serializer,
            clock=self.effective_clock(),
        )
        if immediate:
            return self.execute_batch(mutator)
        return self.execute_if_not_batched(mutator)

    def delete_column(
        self, key: Any, column_name: Any, mutator: Mutator | None = None
    ) -> MutationResult | None:
        """Delete one column of a row; same flush rules as ``delete_row``."""
        immediate = mutator is None
        if mutator is None:
            mutator = self.create_mutator()
        mutator.add_deletion(
            key, self._column_family, column_name, self._top_serializer,
            clock=self.effective_clock(),
        )
        if immediate:
            return self.execute_batch(mutator)
        return self.execute_if_not_batched(mutator)

    # -- Updates --

    def create_updater(self, key: Any = None, mutator: Mutator | None = None) -> TemplateUpdater:
        """An updater for ``key`` staging into ``mutator`` (or a fresh one)."""
        if mutator is None:
            mutator = self.create_mutator()
        return TemplateUpdater(self, mutator, key)

    def update(self, updater: TemplateUpdater) -> MutationResult | None:
        return self.execute_if_not_batched(updater)

    # -- Queries --

    def query_columns(
        self, key: Any, predicate: SlicePredicate | None = None
    ) -> ColumnFamilyResult:
        """Read a row using the active predicate unless one is given."""
        if predicate is None:
            predicate = self._active_predicate
        key_bytes = self._key_serializer.to_bytes(key)
        bytes_predicate = predicate.to_bytes_predicate()
        with self._store_call():
            columns = self._session.get_slice(
                self._column_family, key_bytes, bytes_predicate
            )
        return ColumnFamilyResult(
            key, columns, self._top_serializer, dict(self._value_serializers)
        )

    def count_columns(self, key: Any, predicate: SlicePredicate | None = None) -> int:
        return len(self.query_columns(key, predicate))

    def is_column_in_row(self, key: Any, column_name: Any) -> bool:
        predicate = SlicePredicate(self._top_serializer).add_column_name(column_name)
        return column_name in self.query_columns(key, predicate)
