"""Shared fixtures: a session that records what reaches the store."""

import pytest

from cfkit import ColumnFamilyTemplate, MemorySession
from cfkit.serializers import STRING


class RecordingSession:
    """Wraps a MemorySession, counting clocks and flushes.

    Set ``fail_with`` to an exception to make the next flushes and
    reads raise it.
    """

    def __init__(self) -> None:
        self.inner = MemorySession()
        self.flushes: list[tuple] = []
        self.clock_calls = 0
        self.fail_with: Exception | None = None

    def create_clock(self) -> int:
        self.clock_calls += 1
        return self.inner.create_clock()

    def batch_mutate(self, mutations):
        if self.fail_with is not None:
            raise self.fail_with
        self.flushes.append(tuple(mutations))
        return self.inner.batch_mutate(mutations)

    def get_slice(self, column_family, key, predicate):
        if self.fail_with is not None:
            raise self.fail_with
        return self.inner.get_slice(column_family, key, predicate)


@pytest.fixture
def session():
    return RecordingSession()


@pytest.fixture
def cf(session):
    return ColumnFamilyTemplate(session, "Users", STRING, STRING)
