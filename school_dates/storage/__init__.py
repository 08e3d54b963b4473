"""Key-value storage backends."""

from .kv import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    school_dates_key,
)

__all__ = [
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "school_dates_key",
]
