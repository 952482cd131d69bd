"""Public schema exports."""

from .commands import (
    AuthDetailsPayload,
    CommandRejection,
    MomentPayload,
    PermissionState,
    PermissionStatusPayload,
    SetRegionPayload,
)

__all__ = [
    "AuthDetailsPayload",
    "CommandRejection",
    "MomentPayload",
    "PermissionState",
    "PermissionStatusPayload",
    "SetRegionPayload",
]
