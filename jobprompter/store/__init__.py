# Job Prompter Local Cache
"""Persisted dashboard state."""

from .models import ImportRecord, StatsSnapshot
from .manager import (
    KeyValueStore,
    MemoryStore,
    JSONFileStore,
    LocalCache,
    StoreError,
    IMPORT_LOGS_KEY,
    STATS_KEY,
    STATS_TIMESTAMP_KEY,
)

__all__ = [
    "ImportRecord",
    "StatsSnapshot",
    "KeyValueStore",
    "MemoryStore",
    "JSONFileStore",
    "LocalCache",
    "StoreError",
    "IMPORT_LOGS_KEY",
    "STATS_KEY",
    "STATS_TIMESTAMP_KEY",
]
