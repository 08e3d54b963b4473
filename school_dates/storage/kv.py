"""
Key-value storage for school dates documents.

The pipeline needs two operations: read a key as JSON and write a JSON
string to a key. Store errors are not caught here; they propagate to
the caller, which owns retry scheduling.
"""

import asyncio
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Union

import structlog

logger = structlog.get_logger(__name__)


KEY_TEMPLATE = "school_dates:v1:{slug}:latest"
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def school_dates_key(school_slug: str) -> str:
    """Store key of the latest document for a school."""
    return KEY_TEMPLATE.format(slug=school_slug)


class KeyValueStore(Protocol):
    """Minimal async key-value interface used by the refresher."""

    async def get_json(self, key: str) -> Optional[dict]:
        ...

    async def put(self, key: str, value: str) -> None:
        ...


class MemoryKeyValueStore:
    """In-process store, mainly for tests and dry runs."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.writes = 0

    async def get_json(self, key: str) -> Optional[dict]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    async def put(self, key: str, value: str) -> None:
        self._data[key] = value
        self.writes += 1

    def get_raw(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class FileKeyValueStore:
    """
    Directory-backed store, one JSON file per key.

    Writes go to a temporary file that is then renamed over the target,
    so a reader never sees a half-written document.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        safe_name = _UNSAFE_KEY_CHARS.sub("_", key.replace(":", "__"))
        return self.directory / f"{safe_name}.json"

    async def get_json(self, key: str) -> Optional[dict]:
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)

    def _read(self, key: str) -> Optional[dict]:
        path = self.path_for(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # One temp file per write; concurrent writers must not share it
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("store_written", key=key, path=str(path))
