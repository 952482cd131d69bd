"""Payloads exchanged with the view layer for each bridge command."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _CamelPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AuthDetailsPayload(_CamelPayload):
    """Arguments of ``setAuthDetails`` and result of ``getAuthDetails``."""

    device_id: str = Field(..., alias="deviceId", min_length=1)
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken", min_length=1)


class SetRegionPayload(_CamelPayload):
    region: str = Field(..., min_length=1, description="Region and push topic name.")


class MomentPayload(_CamelPayload):
    """Result of ``fetchLastMoment``."""

    id: str
    region: str
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")


class PermissionState(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    PROMPT = "prompt"


class PermissionStatusPayload(_CamelPayload):
    status: PermissionState


class CommandRejection(_CamelPayload):
    """Body returned when a command is rejected."""

    command: str
    error: str


__all__ = [
    "AuthDetailsPayload",
    "CommandRejection",
    "MomentPayload",
    "PermissionState",
    "PermissionStatusPayload",
    "SetRegionPayload",
]
