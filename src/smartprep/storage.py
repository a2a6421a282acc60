"""Key-value persistence for the session, uploaded documents and generated sets.

Each slot holds one JSON document and is always read and written whole.
Reads fail closed: a missing slot or one holding malformed JSON yields the
default instead of raising, so corrupted local state never breaks the app.
"""
import json
import logging
from datetime import datetime

from smartprep.db import DEFAULT_DB_PATH, get_connection, init_db

logger = logging.getLogger(__name__)

USER_KEY = "smartprep_user"
FILES_KEY = "smartprep_files"
GEN_KEY = "smartprep_generations"


class Storage:
    """Interface shared by the durable and in-memory stores."""

    def _read(self, key: str) -> str | None:
        raise NotImplementedError

    def _write(self, key: str, raw: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def save(self, key: str, value) -> None:
        self._write(key, json.dumps(value))

    def load(self, key: str, default=None):
        raw = self._read(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed data in slot %s", key)
            return default


class SqliteStorage(Storage):
    """Slots stored as rows of the kv_store table in a local SQLite file."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        init_db(db_path)

    def _read(self, key: str) -> str | None:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        conn.close()
        return row["value"] if row else None

    def _write(self, key: str, raw: str) -> None:
        now = datetime.now().isoformat()
        conn = get_connection(self.db_path)
        conn.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=?, updated_at=?",
            (key, raw, now, raw, now),
        )
        conn.commit()
        conn.close()

    def remove(self, key: str) -> None:
        conn = get_connection(self.db_path)
        conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        conn.commit()
        conn.close()


class MemoryStorage(Storage):
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self):
        self._slots = {}

    def _read(self, key: str) -> str | None:
        return self._slots.get(key)

    def _write(self, key: str, raw: str) -> None:
        self._slots[key] = raw

    def remove(self, key: str) -> None:
        self._slots.pop(key, None)


def load_records(store: Storage, key: str, from_dict) -> list:
    """Load a list slot, skipping records that no longer deserialize."""
    data = store.load(key, [])
    if not isinstance(data, list):
        logger.warning("Slot %s does not hold a list; treating as empty", key)
        return []
    records = []
    for entry in data:
        try:
            records.append(from_dict(entry))
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping unreadable record in slot %s", key)
    return records


def prepend_record(store: Storage, key: str, record, from_dict) -> None:
    existing = load_records(store, key, from_dict)
    store.save(key, [record.to_dict()] + [r.to_dict() for r in existing])
