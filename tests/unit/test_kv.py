"""Tests for key-value stores."""

import asyncio
import json
import os

import pytest

from school_dates.storage.kv import (
    FileKeyValueStore,
    MemoryKeyValueStore,
    school_dates_key,
)


def test_school_dates_key():
    """Test the latest-document key layout."""
    assert school_dates_key("st-example") == "school_dates:v1:st-example:latest"


class TestMemoryKeyValueStore:
    """Tests for MemoryKeyValueStore."""

    @pytest.mark.asyncio
    async def test_missing_key(self):
        """Test reading an absent key."""
        assert await MemoryKeyValueStore().get_json("missing") is None

    @pytest.mark.asyncio
    async def test_put_and_get(self):
        """Test values are stored as strings and read as JSON."""
        store = MemoryKeyValueStore()
        await store.put("k", json.dumps({"a": 1}))

        assert await store.get_json("k") == {"a": 1}
        assert store.get_raw("k") == '{"a": 1}'
        assert "k" in store
        assert store.writes == 1


class TestFileKeyValueStore:
    """Tests for FileKeyValueStore."""

    @pytest.mark.asyncio
    async def test_put_and_get(self, tmp_path):
        """Test round trip through a file."""
        store = FileKeyValueStore(tmp_path / "store")
        key = school_dates_key("st-example")
        await store.put(key, json.dumps({"schemaVersion": 1}))

        assert await store.get_json(key) == {"schemaVersion": 1}
        assert store.path_for(key).exists()

    @pytest.mark.asyncio
    async def test_missing_key(self, tmp_path):
        """Test reading a key that was never written."""
        assert await FileKeyValueStore(tmp_path).get_json("absent") is None

    def test_filesystem_safe_names(self, tmp_path):
        """Test keys map to plain file names inside the directory."""
        store = FileKeyValueStore(tmp_path)
        path = store.path_for("school_dates:v1:../etc:latest")

        assert path.parent == tmp_path
        assert ":" not in path.name
        assert "/" not in path.name

    @pytest.mark.asyncio
    async def test_overwrite_leaves_no_temp_file(self, tmp_path):
        """Test writes replace the previous document."""
        store = FileKeyValueStore(tmp_path)
        await store.put("k", '{"v": 1}')
        await store.put("k", '{"v": 2}')

        assert await store.get_json("k") == {"v": 2}
        assert [p.name for p in tmp_path.iterdir()] == [store.path_for("k").name]

    @pytest.mark.asyncio
    async def test_concurrent_puts_keep_valid_document(self, tmp_path):
        """Test racing writes to one key leave a complete document."""
        store = FileKeyValueStore(tmp_path)
        big = json.dumps({"items": ["x" * 64] * 2000})
        small = json.dumps({"items": []})

        for _ in range(50):
            await asyncio.gather(store.put("k", big), store.put("k", small))
            assert json.loads(store.path_for("k").read_text(encoding="utf-8")) in (
                json.loads(big),
                json.loads(small),
            )

        assert [p.name for p in tmp_path.iterdir()] == [store.path_for("k").name]

    @pytest.mark.asyncio
    async def test_failed_write_removes_temp_file(self, tmp_path, monkeypatch):
        """Test a failed rename keeps the old document and cleans up."""
        store = FileKeyValueStore(tmp_path)
        await store.put("k", '{"v": 1}')

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(OSError):
            await store.put("k", '{"v": 2}')

        assert await store.get_json("k") == {"v": 1}
        assert [p.name for p in tmp_path.iterdir()] == [store.path_for("k").name]
