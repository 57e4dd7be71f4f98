"""
Local key-value cache backed by SQLite.

Stands in for the browser's per-origin storage: string keys, string values,
get/set/remove. It mirrors the last successful remote read or write for each
user so records can still be shown when the remote store is unreachable.

Every storage failure surfaces as CacheUnavailableError; callers decide
whether to degrade (the gateway always does).

Key scheme:
    symptomRecords_<user_name>  - JSON array of that user's records
    symptom_tracker_user        - name of the currently selected user
"""
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from symptom_svc.core.datetime_utils import format_iso_millis, utc_now
from symptom_svc.core.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)

RECORDS_KEY_PREFIX = "symptomRecords_"
CURRENT_USER_KEY = "symptom_tracker_user"


def records_key(user_name: str) -> str:
    """Cache key holding the record mirror for one user."""
    return f"{RECORDS_KEY_PREFIX}{user_name}"


class LocalCache:
    """
    SQLite-backed string key-value store.

    Usage:
        cache = LocalCache(db_path="data/local_cache.db")
        cache.set("symptom_tracker_user", "mina")
        cache.get("symptom_tracker_user")  # "mina"
    """

    def __init__(self, db_path: str, busy_timeout: int = 5000):
        """
        Initialize the cache file.

        Args:
            db_path: Path to the SQLite file. Parent directories are created.
            busy_timeout: SQLite busy timeout in milliseconds.

        Raises:
            CacheUnavailableError: If the file cannot be created or opened.
        """
        self.db_path = db_path
        self.busy_timeout = busy_timeout

        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._init_db()
        except (OSError, sqlite3.Error) as e:
            raise CacheUnavailableError(reason=f"cannot open {self.db_path}: {e}") from e

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")
        return conn

    def _init_db(self) -> None:
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()
        logger.info(f"Local cache initialized: {self.db_path}")

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        try:
            conn = self._connect()
            try:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise CacheUnavailableError(reason=f"get {key!r}: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        try:
            conn = self._connect()
            try:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                   updated_at = excluded.updated_at
                    """,
                    (key, value, format_iso_millis(utc_now())),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise CacheUnavailableError(reason=f"set {key!r}: {e}") from e

    def remove(self, key: str) -> None:
        """Delete a key. Removing an absent key is not an error."""
        try:
            conn = self._connect()
            try:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise CacheUnavailableError(reason=f"remove {key!r}: {e}") from e
