"""Tests for the Disk cell store."""

import shutil
import tempfile

import pytest

from cfkit.kv.disk import Disk


@pytest.fixture
def disk_store():
    tmpdir = tempfile.mkdtemp()
    store = Disk(tmpdir)
    yield store, tmpdir
    store.close()
    shutil.rmtree(tmpdir, ignore_errors=True)


class TestDiskBasic:
    def test_set_many_get(self, disk_store):
        store, _ = disk_store
        store.set_many(k=b"v")
        assert store.get("k") == b"v"

    def test_get_missing(self, disk_store):
        store, _ = disk_store
        assert store.get("nope") is None

    def test_set_many_rejects_non_bytes(self, disk_store):
        store, _ = disk_store
        with pytest.raises(TypeError):
            store.set_many(k="v")

    def test_scan(self, disk_store):
        store, _ = disk_store
        store.set_many(**{"cf/01/02": b"2", "cf/01/01": b"1", "other/01/01": b"x"})
        assert list(store.scan("cf/01/")) == [("cf/01/01", b"1"), ("cf/01/02", b"2")]

    def test_remove_many(self, disk_store):
        store, _ = disk_store
        store.set_many(a=b"1", b=b"2")
        store.remove_many("a", "missing")
        assert store.get("a") is None
        assert store.get("b") == b"2"
        assert list(store.scan("a")) == []


class TestDiskPersistence:
    def test_survives_reopen(self, disk_store):
        store, tmpdir = disk_store
        store.set_many(**{"cf/01/01": b"v"})
        reopened = Disk(tmpdir)
        try:
            assert reopened.get("cf/01/01") == b"v"
            assert list(reopened.scan("cf/01/")) == [("cf/01/01", b"v")]
        finally:
            reopened.close()
