"""Mutator: a batch of staged row/column writes and deletes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Any

from .serializers import Serializer

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)


class MutationKind(Enum):
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class MutationResult:
    """Acknowledgement of one flush."""

    mutation_count: int
    execution_time_micros: int


@dataclass(frozen=True)
class Mutation:
    """One staged write or delete.

    A deletion with no ``column_name`` removes the whole row. Encoded
    forms are computed once, on first access.
    """

    kind: MutationKind
    key: Any
    column_family: str
    key_serializer: Serializer
    clock: int
    column_name: Any = None
    name_serializer: Serializer | None = None
    value: Any = None
    value_serializer: Serializer | None = None

    @property
    def is_row_deletion(self) -> bool:
        return self.kind is MutationKind.DELETE and self.column_name is None

    @cached_property
    def key_bytes(self) -> bytes:
        return self.key_serializer.to_bytes(self.key)

    @cached_property
    def name_bytes(self) -> bytes | None:
        if self.column_name is None or self.name_serializer is None:
            return None
        return self.name_serializer.to_bytes(self.column_name)

    @cached_property
    def value_bytes(self) -> bytes | None:
        if self.kind is not MutationKind.INSERT or self.value_serializer is None:
            return None
        return self.value_serializer.to_bytes(self.value)

    def encode(self) -> tuple[bytes, bytes | None, bytes | None]:
        return self.key_bytes, self.name_bytes, self.value_bytes


class Mutator:
    """Accumulates mutations for one session and row-key type.

    Staging calls only append to an in-memory list and never raise;
    encoding and store errors surface from ``execute()``. A mutator is
    not safe for concurrent use.
    """

    def __init__(self, session: Session, key_serializer: Serializer) -> None:
        self._session = session
        self._key_serializer = key_serializer
        self._pending: list[Mutation] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def key_serializer(self) -> Serializer:
        return self._key_serializer

    # -- Staging --

    def add_deletion(
        self,
        key: Any,
        column_family: str,
        column_name: Any = None,
        name_serializer: Serializer | None = None,
        clock: int | None = None,
    ) -> Mutator:
        """Stage a column deletion, or a row deletion if no column is named.

        Without an explicit clock a fresh one is taken from the session.
        """
        if clock is None:
            clock = self._session.create_clock()
        self._pending.append(
            Mutation(
                kind=MutationKind.DELETE,
                key=key,
                column_family=column_family,
                key_serializer=self._key_serializer,
                clock=clock,
                column_name=column_name,
                name_serializer=name_serializer,
            )
        )
        return self

    def add_insertion(
        self,
        key: Any,
        column_family: str,
        column_name: Any,
        value: Any,
        name_serializer: Serializer,
        value_serializer: Serializer,
        clock: int | None = None,
    ) -> Mutator:
        """Stage a single column write."""
        if clock is None:
            clock = self._session.create_clock()
        self._pending.append(
            Mutation(
                kind=MutationKind.INSERT,
                key=key,
                column_family=column_family,
                key_serializer=self._key_serializer,
                clock=clock,
                column_name=column_name,
                name_serializer=name_serializer,
                value=value,
                value_serializer=value_serializer,
            )
        )
        return self

    # -- Execute / discard --

    def encode(self) -> None:
        """Encode every pending mutation without contacting the session.

        Raises whatever a serializer raises for a value it cannot encode.
        """
        for mutation in self._pending:
            mutation.encode()

    def execute(self) -> MutationResult:
        """Send every pending mutation to the session in one call.

        Mutations are encoded first, so serializer errors surface before
        the session sees any of the batch. Pending mutations are left in
        place; callers clear them with ``discard_pending_mutations()``
        once the flush succeeded.
        """
        if not self._pending:
            return MutationResult(mutation_count=0, execution_time_micros=0)
        self.encode()
        logger.debug("Flushing %d mutation(s)", len(self._pending))
        return self._session.batch_mutate(tuple(self._pending))

    def discard_pending_mutations(self) -> None:
        """Drop all staged mutations without sending them."""
        self._pending.clear()

    @property
    def pending(self) -> tuple[Mutation, ...]:
        return tuple(self._pending)

    @property
    def has_changes(self) -> bool:
        return bool(self._pending)

    def __len__(self) -> int:
        return len(self._pending)
