"""Local key-value store for persisted dashboard state.

The dashboard keeps a small amount of optimistic state between refreshes:
the most recent manually triggered imports and the stats snapshot computed
right after a submission. The store is injected so the reconciler can be
exercised without touching disk.

JSONFileStore keeps every key in one JSON object file. It uses fcntl for
exclusive file locking and atomic writes (write to temp, then rename) to
prevent corruption.
"""

import fcntl
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple

from jobprompter.store.models import ImportRecord, StatsSnapshot


logger = logging.getLogger("jobprompter.store")

IMPORT_LOGS_KEY = "importLogs"
STATS_KEY = "currentStats"
STATS_TIMESTAMP_KEY = "currentStatsTimestamp"

ALL_KEYS = (IMPORT_LOGS_KEY, STATS_KEY, STATS_TIMESTAMP_KEY)


class StoreError(Exception):
    """Exception raised for store file operations failures."""
    pass


class KeyValueStore:
    """String key-value store with get/set/delete."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """In-process store, used for tests and ephemeral runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JSONFileStore(KeyValueStore):
    """Store backed by a single JSON file with file locking and atomic writes."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize file store.

        Args:
            path: Path to store JSON file. Defaults to data/local_cache.json
        """
        self.path = Path(path) if path else Path("data/local_cache.json")

    def _ensure_dir(self):
        """Ensure data directory exists."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> Dict[str, str]:
        """Read every key from the JSON file."""
        self._ensure_dir()

        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid JSON in store file: {e}")
        except IOError as e:
            raise StoreError(f"Failed to read store file: {e}")

        if not isinstance(data, dict):
            raise StoreError("Store file must contain a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        """Write every key atomically using temp file + rename."""
        self._ensure_dir()

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent,
            suffix='.tmp'
        )

        try:
            with os.fdopen(fd, 'w') as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

            os.replace(tmp_path, str(self.path))
        except Exception as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise StoreError(f"Failed to write store file: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def keys(self) -> List[str]:
        return list(self._read_all())


class LocalCache:
    """Typed view over the persisted dashboard keys.

    Read-modify-write is not transactional: two near-simultaneous
    submissions can lose one record.
    """

    def __init__(self, store: KeyValueStore, max_records: int = 10):
        self.store = store
        self.max_records = max_records
        self._lock = threading.Lock()

    def _load_json(self, key: str) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed value under '{key}'")
            return None

    def get_records(self) -> List[Dict[str, Any]]:
        """Persisted import records, newest first (raw dictionaries)."""
        data = self._load_json(IMPORT_LOGS_KEY)
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]

    def push_record(self, record: ImportRecord) -> List[Dict[str, Any]]:
        """Prepend a record and keep only the newest max_records entries."""
        with self._lock:
            records = self.get_records()
            records.insert(0, record.to_dict())
            records = records[:self.max_records]
            self.store.set(IMPORT_LOGS_KEY, json.dumps(records))
        return records

    def get_stats(self) -> Tuple[Optional[StatsSnapshot], Optional[int]]:
        """Persisted stats snapshot and its capture time (epoch millis)."""
        data = self._load_json(STATS_KEY)
        stats = StatsSnapshot.from_dict(data) if isinstance(data, dict) else None

        raw_ts = self.store.get(STATS_TIMESTAMP_KEY)
        try:
            timestamp = int(raw_ts) if raw_ts is not None else None
        except ValueError:
            logger.warning(f"Ignoring malformed value under '{STATS_TIMESTAMP_KEY}'")
            timestamp = None

        return stats, timestamp

    def set_stats(self, stats: StatsSnapshot, timestamp_ms: int) -> None:
        self.store.set(STATS_KEY, json.dumps(stats.to_dict()))
        self.store.set(STATS_TIMESTAMP_KEY, str(int(timestamp_ms)))

    def clear_stats(self) -> None:
        self.store.delete(STATS_KEY)
        self.store.delete(STATS_TIMESTAMP_KEY)

    def clear_all(self) -> None:
        for key in ALL_KEYS:
            self.store.delete(key)
