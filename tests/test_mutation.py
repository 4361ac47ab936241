"""Tests for the Mutator batch."""

import pytest

from cfkit import Mutator, MutationResult
from cfkit.mutation import MutationKind
from cfkit.serializers import LONG, STRING


class TestMutatorStaging:
    def test_add_deletion_stages_without_flushing(self, session):
        m = Mutator(session, STRING)
        m.add_deletion("row1", "Users", "colA", STRING, clock=5)
        assert len(m) == 1
        assert m.has_changes
        assert session.flushes == []

    def test_row_deletion_descriptor(self, session):
        m = Mutator(session, STRING)
        m.add_deletion("row1", "Users", clock=5)
        (mutation,) = m.pending
        assert mutation.kind is MutationKind.DELETE
        assert mutation.is_row_deletion
        assert mutation.column_name is None
        assert mutation.name_bytes is None
        assert mutation.key_bytes == b"row1"
        assert mutation.clock == 5

    def test_deletion_without_clock_asks_session(self, session):
        m = Mutator(session, STRING)
        m.add_deletion("row1", "Users", "colA", STRING)
        assert session.clock_calls == 1
        assert m.pending[0].clock > 0

    def test_add_insertion(self, session):
        m = Mutator(session, STRING)
        m.add_insertion("row1", "Users", "age", 30, STRING, LONG, clock=1)
        (mutation,) = m.pending
        assert mutation.kind is MutationKind.INSERT
        assert mutation.value_bytes == LONG.to_bytes(30)
        assert mutation.name_bytes == b"age"

    def test_staging_does_not_encode(self, session):
        m = Mutator(session, STRING)
        # a bad key only fails once the mutation is encoded at flush
        m.add_deletion(12345, "Users", clock=1)
        assert len(m) == 1
        with pytest.raises(TypeError):
            m.execute()
        assert session.flushes == []

    def test_encode_is_cached(self, session):
        m = Mutator(session, STRING)
        m.add_deletion("row1", "Users", "colA", STRING, clock=1)
        (mutation,) = m.pending
        assert mutation.key_bytes is mutation.key_bytes
        assert mutation.encode() == (b"row1", b"colA", None)

    def test_kind_is_enum(self, session):
        m = Mutator(session, STRING)
        m.add_deletion("r", "Users", clock=1)
        m.add_insertion("r", "Users", "a", "v", STRING, STRING, clock=1)
        assert [mu.kind for mu in m.pending] == [MutationKind.DELETE, MutationKind.INSERT]


class TestMutatorExecute:
    def test_execute_sends_one_batch(self, session):
        m = Mutator(session, STRING)
        m.add_deletion("r", "Users", "a", STRING, clock=1)
        m.add_deletion("r", "Users", "b", STRING, clock=1)
        result = m.execute()
        assert isinstance(result, MutationResult)
        assert result.mutation_count == 2
        assert len(session.flushes) == 1
        assert len(session.flushes[0]) == 2

    def test_execute_keeps_pending(self, session):
        m = Mutator(session, STRING)
        m.add_deletion("r", "Users", clock=1)
        m.execute()
        assert m.has_changes

    def test_execute_empty_is_no_op(self, session):
        result = Mutator(session, STRING).execute()
        assert result.mutation_count == 0
        assert session.flushes == []

    def test_discard_pending_mutations(self, session):
        m = Mutator(session, STRING)
        m.add_deletion("r", "Users", clock=1)
        m.discard_pending_mutations()
        assert not m.has_changes
        assert m.pending == ()
