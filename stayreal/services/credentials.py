"""
Persistence of the device's authentication triple.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from pydantic import ValidationError

from stayreal.clients.sqlite_store import SQLiteBlobStore
from stayreal.models import AuthenticationDetails
from stayreal.services.token_cipher import TokenCipherService

logger = logging.getLogger(__name__)


class CredentialStore:
    """Owns the device's ``AuthenticationDetails``.

    ``get``, ``set`` and ``clear`` are serialized by one lock, so a reader on
    any thread sees either the previous triple or the new one in full. Absence
    is a valid state: ``get`` returns ``None`` before the first ``set`` and
    after ``clear``.
    """

    _NAMESPACE = "auth"
    _KEY = "details"

    def __init__(self, store: SQLiteBlobStore, cipher: TokenCipherService) -> None:
        self._store = store
        self._cipher = cipher
        self._lock = threading.Lock()

    def get(self) -> Optional[AuthenticationDetails]:
        with self._lock:
            return self._read()

    def _read(self) -> Optional[AuthenticationDetails]:
        blob = self._store.get(namespace=self._NAMESPACE, key=self._KEY)
        if blob is None:
            return None
        try:
            return AuthenticationDetails.model_validate(self._cipher.open(blob))
        except (ValueError, ValidationError):
            # A blob sealed under another secret cannot be recovered.
            logger.warning("Discarding unreadable authentication details")
            return None

    def set(self, details: AuthenticationDetails) -> None:
        blob = self._cipher.seal(details.model_dump(by_alias=True))
        with self._lock:
            self._store.put(namespace=self._NAMESPACE, key=self._KEY, value=blob)

    def replace(
        self, expected: AuthenticationDetails, details: AuthenticationDetails
    ) -> bool:
        """Write ``details`` only if the stored triple still equals ``expected``."""
        blob = self._cipher.seal(details.model_dump(by_alias=True))
        with self._lock:
            if self._read() != expected:
                return False
            self._store.put(namespace=self._NAMESPACE, key=self._KEY, value=blob)
        return True

    def clear(self) -> None:
        with self._lock:
            self._store.delete(namespace=self._NAMESPACE, key=self._KEY)


__all__ = ["CredentialStore"]
