"""Last observed moment identifier, used by callers for change detection."""

from __future__ import annotations

from typing import Optional

from stayreal.clients.sqlite_store import SQLiteBlobStore


class MomentCache:
    """Last-write-wins holder of the most recently fetched moment id."""

    _NAMESPACE = "cache"
    _KEY = "last_moment_id"

    def __init__(self, store: SQLiteBlobStore) -> None:
        self._store = store

    def set_last_moment_id(self, moment_id: str) -> None:
        self._store.put(namespace=self._NAMESPACE, key=self._KEY, value=moment_id)

    def get_last_moment_id(self) -> Optional[str]:
        return self._store.get(namespace=self._NAMESPACE, key=self._KEY)


__all__ = ["MomentCache"]
