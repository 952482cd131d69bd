"""Error taxonomy shared by the refresh, request and subscription paths."""

from __future__ import annotations

from enum import Enum


class AuthErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


class AuthError(Exception):
    """Raised when a refresh or an authenticated request cannot be completed."""

    def __init__(self, kind: AuthErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or kind.value.replace("_", " ").capitalize()
        super().__init__(self.message)

    @classmethod
    def unauthorized(cls, message: str | None = None) -> "AuthError":
        return cls(AuthErrorKind.UNAUTHORIZED, message)

    @classmethod
    def network_error(cls, message: str | None = None) -> "AuthError":
        return cls(AuthErrorKind.NETWORK_ERROR, message)

    @classmethod
    def unknown(cls, message: str | None = None) -> "AuthError":
        return cls(AuthErrorKind.UNKNOWN, message)


class TokenExchangeError(Exception):
    """Raised when the token endpoint rejects a refresh credential."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class SubscriptionError(Exception):
    """Raised when a push topic subscription could not be changed."""

    def __init__(self, topic: str, reason: str, *, operation: str = "subscribe") -> None:
        self.topic = topic
        self.reason = reason
        self.operation = operation
        super().__init__(f"Topic {operation} failed for {topic!r}: {reason}")


class BridgeCommandError(Exception):
    """Uniform rejection returned to the view layer for any failed command."""

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        self.message = message
        super().__init__(message)


__all__ = [
    "AuthError",
    "AuthErrorKind",
    "BridgeCommandError",
    "SubscriptionError",
    "TokenExchangeError",
]
