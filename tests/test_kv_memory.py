"""Tests for the Memory cell store and its key index."""

import threading

import pytest

from cfkit.kv.keys import SortedKeys
from cfkit.kv.memory import Memory


class TestMemoryBasic:
    def test_set_many_get(self):
        store = Memory()
        store.set_many(a=b"1", b=b"2")
        assert store.get("a") == b"1"
        assert store.get("b") == b"2"

    def test_get_missing(self):
        assert Memory().get("nope") is None

    def test_set_many_rejects_non_bytes(self):
        store = Memory()
        with pytest.raises(TypeError, match="must be bytes"):
            store.set_many(a=b"1", b=2)
        assert store.get("a") is None

    def test_overwrite(self):
        store = Memory()
        store.set_many(k=b"1")
        store.set_many(k=b"2")
        assert store.get("k") == b"2"
        assert len(store) == 1


class TestMemoryScan:
    def test_scan_filters_and_sorts(self):
        store = Memory()
        store.set_many(**{"cf/01/ff": b"3", "cf/01/00": b"1", "cf/02/00": b"x"})
        assert list(store.scan("cf/01/")) == [("cf/01/00", b"1"), ("cf/01/ff", b"3")]

    def test_scan_empty(self):
        assert list(Memory().scan("cf/")) == []

    def test_scan_skips_removed(self):
        store = Memory()
        store.set_many(**{"cf/01/00": b"1", "cf/01/01": b"2"})
        store.remove_many("cf/01/00")
        assert list(store.scan("cf/01/")) == [("cf/01/01", b"2")]


class TestMemoryRemove:
    def test_remove_many(self):
        store = Memory()
        store.set_many(a=b"1", b=b"2", c=b"3")
        store.remove_many("a", "c", "missing")
        assert store.get("a") is None
        assert store.get("b") == b"2"
        assert len(store) == 1


class TestMemoryConcurrency:
    def test_concurrent_writers(self):
        store = Memory()

        def writer(n):
            for i in range(100):
                store.set_many(**{f"{n}/{i}": b"x"})

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store) == 400
        assert len(list(store.scan("2/"))) == 100


class TestSortedKeys:
    def test_initial_keys_sorted_and_unique(self):
        keys = SortedKeys(["b", "a", "b"])
        assert len(keys) == 2
        assert keys.with_prefix("") == ["a", "b"]

    def test_add_and_discard(self):
        keys = SortedKeys()
        keys.add("x")
        keys.add("x")
        assert "x" in keys
        keys.discard("x")
        keys.discard("x")
        assert "x" not in keys
        assert len(keys) == 0

    def test_with_prefix_is_bounded(self):
        keys = SortedKeys(["a/1", "a/2", "ab", "b/1", "a"])
        assert keys.with_prefix("a/") == ["a/1", "a/2"]
        assert keys.with_prefix("c") == []
