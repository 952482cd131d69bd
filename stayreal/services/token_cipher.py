"""Symmetric sealing of credential blobs before they reach storage."""

from __future__ import annotations

import base64
import hashlib
import json
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken


class TokenCipherService:
    """Seal and open JSON documents using a derived Fernet key."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def seal(self, document: Dict[str, Any]) -> str:
        """Serialize ``document`` and return its ciphertext."""
        serialized = json.dumps(document, separators=(",", ":"), sort_keys=True)
        return self._fernet.encrypt(serialized.encode("utf-8")).decode("utf-8")

    def open(self, blob: str) -> Dict[str, Any]:
        """Decrypt a sealed blob back into its document."""
        try:
            plaintext = self._fernet.decrypt(blob.encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError("Failed to open sealed blob; invalid ciphertext.") from exc
        return json.loads(plaintext)


__all__ = ["TokenCipherService"]
