"""SQLite-backed storage for opaque per-installation blobs."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional


class SQLiteBlobStore:
    """Atomic get/put/delete of string blobs keyed by (namespace, key).

    Every operation runs in its own transaction so a reader never observes a
    partially written value.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS blobs (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    PRIMARY KEY (namespace, key)
                )
                """
            )

    def put(self, *, namespace: str, key: str, value: str) -> None:
        if not namespace or not key:
            raise ValueError("Blob must be addressed by a namespace and a key")

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO blobs (namespace, key, value)
                VALUES (?, ?, ?)
                ON CONFLICT(namespace, key) DO UPDATE SET value = excluded.value
                """,
                (namespace, key, value),
            )

    def get(self, *, namespace: str, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM blobs WHERE namespace = ? AND key = ?",
                (namespace, key),
            ).fetchone()
        if not row:
            return None
        return row["value"]

    def delete(self, *, namespace: str, key: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM blobs WHERE namespace = ? AND key = ?",
                (namespace, key),
            )


__all__ = ["SQLiteBlobStore"]
