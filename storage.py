import json
import logging
import sqlite3
from typing import Any, NamedTuple, Optional

from config import DB_NAME, STORAGE_QUOTA_BYTES
from database import get_db, init_db
from errors import StaleRevision, StorageWriteFailure

logger = logging.getLogger(__name__)


class StoredEntry(NamedTuple):
    value: str  # raw JSON text
    revision: int


class KeyValueStore:
    """Durable key -> JSON store, laid out like the browser's localStorage.

    Every key carries a revision that increases on each write. Writers that
    pass ``expected_revision`` get a StaleRevision error instead of silently
    overwriting a newer value.
    """

    def __init__(self, db_name: str = DB_NAME, quota_bytes: int = STORAGE_QUOTA_BYTES):
        self.db_name = db_name
        self.quota_bytes = quota_bytes
        init_db(db_name)

    def get_entry(self, key: str) -> Optional[StoredEntry]:
        with get_db(self.db_name) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value, revision FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            if row:
                return StoredEntry(value=row[0], revision=row[1])
            return None

    def get_item(self, key: str) -> Any:
        """Return the decoded value, or None if the key is absent.

        Raises json.JSONDecodeError when the stored text is not valid JSON.
        """
        entry = self.get_entry(key)
        if entry is None:
            return None
        return json.loads(entry.value)

    def revision(self, key: str) -> int:
        entry = self.get_entry(key)
        return entry.revision if entry else 0

    def set_item(self, key: str, value: Any, expected_revision: Optional[int] = None) -> int:
        """Write ``value`` under ``key`` and return the new revision.

        ``expected_revision`` of 0 means "the key must not exist yet".
        """
        encoded = json.dumps(value)
        try:
            with get_db(self.db_name) as conn:
                cursor = conn.cursor()
                cursor.execute("BEGIN IMMEDIATE")
                cursor.execute("SELECT revision FROM kv_store WHERE key = ?", (key,))
                row = cursor.fetchone()
                current = row[0] if row else 0
                if expected_revision is not None and expected_revision != current:
                    conn.rollback()
                    raise StaleRevision(key, expected_revision, current)
                cursor.execute("SELECT COALESCE(SUM(LENGTH(value)), 0) FROM kv_store WHERE key != ?", (key,))
                used = cursor.fetchone()[0]
                if used + len(encoded) > self.quota_bytes:
                    conn.rollback()
                    raise StorageWriteFailure(f"Storage quota exceeded while saving '{key}'")
                new_revision = current + 1
                cursor.execute("""
                    INSERT INTO kv_store (key, value, revision) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        revision = excluded.revision,
                        updated_at = CURRENT_TIMESTAMP
                """, (key, encoded, new_revision))
                conn.commit()
                return new_revision
        except sqlite3.Error as exc:
            logger.error("Failed to write key %s: %s", key, exc)
            raise StorageWriteFailure() from exc

    def remove_item(self, key: str) -> None:
        try:
            with get_db(self.db_name) as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as exc:
            logger.error("Failed to remove key %s: %s", key, exc)
            raise StorageWriteFailure() from exc
