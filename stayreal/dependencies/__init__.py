"""Expose dependency helpers for FastAPI routers."""

from .bridge import BridgeDependency, get_session_bridge
from .config import SettingsDependency, get_app_settings

__all__ = [
    "BridgeDependency",
    "SettingsDependency",
    "get_app_settings",
    "get_session_bridge",
]
